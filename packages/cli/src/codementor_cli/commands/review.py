"""review command — AI code review of a solution file."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from codementor_core.models import ReviewResult

console = Console()

_SEVERITY_STYLE = {"critical": "red", "high": "red", "medium": "yellow", "low": "blue"}


def _line_cell(line_number: int | None) -> str:
    return "—" if line_number is None else str(line_number)


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def render_review(review: ReviewResult) -> None:
    overall = _score_style(review.overall_score)
    readability = _score_style(review.readability_score)
    console.print(
        f"\n[bold]Overall score:[/bold] [{overall}]{review.overall_score}/100[/{overall}]"
        f"   [bold]Readability:[/bold] [{readability}]{review.readability_score}/100[/{readability}]"
    )
    console.print(Panel(escape(review.interviewer_feedback), title="Interviewer feedback", expand=False))

    if review.issues:
        table = Table(title="Issues", show_header=True, header_style="bold cyan")
        table.add_column("Line", justify="right", width=6)
        table.add_column("Type", width=12)
        table.add_column("Severity", width=10)
        table.add_column("Description")
        table.add_column("Solution")
        for issue in review.issues:
            style = _SEVERITY_STYLE.get(issue.severity, "white")
            table.add_row(
                _line_cell(issue.line_number),
                escape(issue.type),
                f"[{style}]{escape(issue.severity)}[/{style}]",
                escape(issue.description),
                escape(issue.solution),
            )
        console.print(table)

    if review.suggestions:
        table = Table(title="Suggestions", show_header=True, header_style="bold cyan")
        table.add_column("Category", width=16)
        table.add_column("Priority", width=9)
        table.add_column("Description")
        for suggestion in review.suggestions:
            description = escape(suggestion.description)
            if suggestion.example:
                description += f"\n[dim]{escape(suggestion.example)}[/dim]"
            table.add_row(escape(suggestion.category), escape(suggestion.priority), description)
        console.print(table)

    c = review.complexity
    console.print(
        f"\n[bold]Time:[/bold] {escape(c.time_complexity)}   [bold]Space:[/bold] {escape(c.space_complexity)}"
    )
    if c.can_optimize:
        console.print(f"[yellow]Can be optimized:[/yellow] {escape(c.optimized_approach)}")
    console.print(f"[bold]Test coverage:[/bold] {escape(review.test_coverage)}")

    if review.follow_up_questions:
        console.print("\n[bold]Follow-up questions:[/bold]")
        for question in review.follow_up_questions:
            console.print(f"  • {escape(question)}")


@click.command("review")
@click.argument("source", metavar="FILE")
@click.option("--challenge", "challenge_title", default=None, help="Challenge title. Defaults to the file name.")
@click.option("--context", default="", help="Extra context for the reviewer (framework, constraints).")
@click.option("--json", "as_json", is_flag=True, help="Print the review as JSON instead of tables.")
@click.pass_context
def review_cmd(ctx, source: str, challenge_title: str | None, context: str, as_json: bool):
    """Review a solution the way a senior interviewer would.

    FILE is the solution source, or '-' to read it from stdin.

    \b
    Required environment variables (one of):
      GEMINI_API_KEY       when using --provider gemini (default)
      OPENAI_API_KEY       when using --provider openai
      CLAUDE_API_KEY       when using --provider claude
      AI_API_KEY           fallback for any provider
    """
    from codementor_cli.common import get_service, make_challenge, read_source

    service = get_service(ctx, source)
    code = read_source(source)
    review = service.review_code(code, make_challenge(challenge_title, source), context)

    if as_json:
        click.echo(json.dumps(review.to_dict(), indent=2))
        return
    render_review(review)
