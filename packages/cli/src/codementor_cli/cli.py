"""CLI entry point for codementor.

Commands:
  review     — AI code review of a solution file
  questions  — follow-up questions an interviewer would ask
  hint       — a graded hint for the current challenge
  chat       — talk to the AI mentor (one-shot or interactive)
  normalize  — run the response extractor on a saved raw reply
  init       — interactive setup wizard that writes .codementor.yml
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codementor_cli.commands.chat import chat_cmd
from codementor_cli.commands.hint import hint_cmd
from codementor_cli.commands.init import init_cmd
from codementor_cli.commands.normalize import normalize_cmd
from codementor_cli.commands.questions import questions_cmd
from codementor_cli.commands.review import review_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("codementor"),
    prog_name="codementor",
)
@click.option(
    "--config",
    "config_path",
    default=".codementor.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODEMENTOR_CONFIG",
)
@click.option(
    "--provider",
    type=click.Choice(["gemini", "openai", "claude"]),
    default=None,
    help="AI provider. Overrides AI_PROVIDER and the config file.",
)
@click.option("--model", default=None, help="Model name. Overrides AI_MODEL and the config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log extraction and provider diagnostics.")
@click.pass_context
def main(ctx: click.Context, config_path: str, provider: str | None, model: str | None, verbose: bool):
    """AI mentor for coding-interview practice."""
    from codementor_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path, cli_overrides={"provider": provider, "model": model})
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
main.add_command(questions_cmd)
main.add_command(hint_cmd)
main.add_command(chat_cmd)
main.add_command(normalize_cmd)
main.add_command(init_cmd)
