"""chat command — talk to the AI mentor."""

from __future__ import annotations

from datetime import datetime, timezone

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from codementor_core.models import ChatMessage, ChatResponse

console = Console()

_EXIT_WORDS = {"exit", "quit", ":q"}


def _print_reply(reply: ChatResponse) -> None:
    if not reply.success:
        console.print(f"[red]{escape(reply.message)}[/red]")
        if reply.error:
            console.print(f"[dim]{escape(reply.error)}[/dim]")
        return
    console.print(Markdown(reply.message))
    if reply.suggestions:
        console.print("[dim]Try asking: " + escape(" · ".join(reply.suggestions)) + "[/dim]")


@click.command("chat")
@click.option("--challenge", "challenge_title", default=None, help="Challenge you are working on.")
@click.option(
    "--code",
    "code_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Solution file the mentor should be able to see.",
)
@click.option("--message", "-m", default=None, help="Ask a single question and exit.")
@click.pass_context
def chat_cmd(ctx, challenge_title: str | None, code_path: str | None, message: str | None):
    """Chat with the AI mentor.

    With --message, asks one question and exits. Otherwise starts an
    interactive session; the last few turns are sent along as context.
    Type 'exit' or press Ctrl-D to leave.
    """
    from codementor_cli.common import get_service, make_challenge, read_source

    service = get_service(ctx, code_path)
    challenge = make_challenge(challenge_title)
    code_context = read_source(code_path) if code_path else ""

    if message is not None:
        _print_reply(service.chat(message, challenge, (), code_context))
        return

    console.print("[bold cyan]codementor chat[/bold cyan] — type 'exit' to leave\n")
    history: list[ChatMessage] = []
    while True:
        try:
            question = click.prompt("You", prompt_suffix="> ")
        except click.Abort:
            console.print()
            break
        if question.strip().lower() in _EXIT_WORDS:
            break

        reply = service.chat(question, challenge, history, code_context)
        _print_reply(reply)
        history.append(
            ChatMessage(role="user", content=question, timestamp=datetime.now(timezone.utc).isoformat())
        )
        if reply.success:
            history.append(ChatMessage(role="assistant", content=reply.message, timestamp=reply.timestamp))
