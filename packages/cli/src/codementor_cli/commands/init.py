"""init command — interactive setup wizard.

Writes .codementor.yml with the chosen provider, model and language so
subsequent commands need no flags, and tells the user which environment
variable to set for the provider's API key. API keys are never written to
the config file.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from codementor_core.config import SUPPORTED_PROVIDERS, api_key_hint, resolve_api_key
from codementor_core.utils.code import LANGUAGE_BY_EXTENSION

console = Console()


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up codementor in the current directory.

    Creates (or updates) the configuration file chosen with --config.
    """
    config_path = Path(ctx.obj.get("config_path", ".codementor.yml") if ctx.obj else ".codementor.yml")

    console.print("\n[bold cyan]codementor init[/bold cyan] — setup wizard\n")

    provider = click.prompt(
        "AI provider",
        type=click.Choice(list(SUPPORTED_PROVIDERS)),
        default="gemini",
    )
    model = click.prompt("Model (leave blank for the provider default)", default="", show_default=False)
    language = click.prompt(
        "Language you practice in",
        type=click.Choice(sorted(set(LANGUAGE_BY_EXTENSION.values()))),
        default="go",
    )

    config: dict = {"provider": provider, "language": language}
    if model.strip():
        config["model"] = model.strip()

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    if resolve_api_key(provider):
        console.print("[green]API key found in the environment.[/green]")
    else:
        console.print(
            f"\n[yellow]No API key found. Set [bold]{api_key_hint(provider)}[/bold] "
            "in your shell or .env before running a review.[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Review a solution with: [bold]codementor review path/to/solution[/bold]")


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
