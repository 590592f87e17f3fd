"""hint command — a graded hint for the current challenge."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

console = Console()


@click.command("hint")
@click.argument("source", metavar="FILE")
@click.option("--challenge", "challenge_title", default=None, help="Challenge title. Defaults to the file name.")
@click.option(
    "--level",
    type=click.IntRange(1, 4),
    default=1,
    show_default=True,
    help="1 = subtle nudge … 4 = detailed explanation with partial code.",
)
@click.option("--context", default="", help="What the challenge asks for; more specific than the title.")
@click.pass_context
def hint_cmd(ctx, source: str, challenge_title: str | None, level: int, context: str):
    """Ask the mentor for a hint without giving the answer away."""
    from codementor_cli.common import get_service, make_challenge, read_source

    service = get_service(ctx, source)
    code = read_source(source)
    hint = service.code_hint(code, make_challenge(challenge_title, source), level, context)
    console.print(Panel(Markdown(hint), title=f"Hint (level {level}/4)", expand=False))
