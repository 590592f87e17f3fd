"""normalize command — run the response extractor on a saved raw reply.

Useful when a review came back looking wrong: save the model's raw text
(or copy it from the --verbose log) and replay it offline, without an API
key or network access.
"""

from __future__ import annotations

import json

import click


@click.command("normalize")
@click.argument("source", metavar="FILE", default="-")
@click.option(
    "--kind",
    type=click.Choice(["review", "questions", "text"]),
    default="review",
    show_default=True,
    help="Which extractor to apply.",
)
def normalize_cmd(source: str, kind: str):
    """Normalize a raw model reply into the structure the service returns.

    FILE holds the raw reply; '-' (the default) reads it from stdin.
    """
    from codementor_cli.common import read_source
    from codementor_core.extractor import extract_questions, extract_review, extract_text

    raw = read_source(source)
    if kind == "review":
        click.echo(json.dumps(extract_review(raw).to_dict(), indent=2))
    elif kind == "questions":
        click.echo(json.dumps(extract_questions(raw), indent=2))
    else:
        click.echo(extract_text(raw))
