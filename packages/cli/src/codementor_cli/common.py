"""Helpers shared by the commands that talk to a provider."""

from __future__ import annotations

from pathlib import Path

import click

from codementor_core.config import api_key_hint
from codementor_core.models import Challenge
from codementor_core.service import MentorService
from codementor_core.utils.code import detect_language


def get_service(ctx: click.Context, source_path: str | None = None) -> MentorService:
    """Build the service for this invocation, refusing to run without a key.

    When a source file is given its extension decides the prompt language;
    unrecognised extensions keep the configured one.
    """
    config = dict(ctx.obj["config"])
    if not config.get("api_key"):
        raise click.UsageError(f"{api_key_hint(config['provider'])} environment variable is not set.")
    if source_path and source_path != "-":
        config["language"] = detect_language(source_path, default=config.get("language") or "go")
    return MentorService(config)


def read_source(path: str) -> str:
    """Read a solution file, or stdin when path is '-'."""
    if path == "-":
        return click.get_text_stream("stdin").read()
    try:
        return Path(path).read_text()
    except OSError as e:
        raise click.BadParameter(f"cannot read {path}: {e.strerror}", param_hint="FILE")


def make_challenge(title: str | None, source_path: str | None = None) -> Challenge | None:
    if title:
        return Challenge(title=title)
    if source_path and source_path != "-":
        return Challenge(title=Path(source_path).stem.replace("_", " "))
    return None
