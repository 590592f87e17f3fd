"""questions command — follow-up questions an interviewer would ask."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

console = Console()


@click.command("questions")
@click.argument("source", metavar="FILE")
@click.option("--challenge", "challenge_title", default=None, help="Challenge title. Defaults to the file name.")
@click.option("--progress", "user_progress", default="", help="What the candidate has done so far.")
@click.pass_context
def questions_cmd(ctx, source: str, challenge_title: str | None, user_progress: str):
    """Generate interviewer follow-up questions for a solution."""
    from codementor_cli.common import get_service, make_challenge, read_source

    service = get_service(ctx, source)
    code = read_source(source)
    questions = service.interviewer_questions(code, make_challenge(challenge_title, source), user_progress)

    console.print("\n[bold]Interviewer questions:[/bold]")
    for i, question in enumerate(questions, start=1):
        console.print(f"  [cyan]{i}.[/cyan] {escape(question)}")
