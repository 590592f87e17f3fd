import logging
import os
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "provider": "gemini",
    "model": None,  # None = the provider's DEFAULT_MODEL
    "max_tokens": 4000,
    "temperature": 0.3,
    "timeout": 30,  # seconds, per upstream request
    "language": "go",  # language the candidate writes in; used for prompts and fences
}

SUPPORTED_PROVIDERS = ("gemini", "openai", "claude")

# Provider-specific variables are tried first, then AI_API_KEY.
API_KEY_ENV_VARS = {
    "gemini": ("GEMINI_API_KEY",),
    "openai": ("OPENAI_API_KEY",),
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
}
GENERIC_API_KEY_ENV_VAR = "AI_API_KEY"

_PROVIDER_ALIASES = {"anthropic": "claude", "google": "gemini"}


def normalize_provider(name: Optional[str]) -> str:
    """Map a configured provider name onto a supported one.

    Unknown or empty names fall back to gemini, the default provider.
    """
    provider = (name or "").strip().lower()
    provider = _PROVIDER_ALIASES.get(provider, provider)
    if provider not in SUPPORTED_PROVIDERS:
        if provider:
            logger.warning("Unknown AI provider %r, falling back to gemini.", name)
        return "gemini"
    return provider


def resolve_api_key(provider: str) -> Optional[str]:
    for var in API_KEY_ENV_VARS.get(provider, ()):
        key = os.environ.get(var)
        if key:
            return key
    return os.environ.get(GENERIC_API_KEY_ENV_VAR) or None


def load_config(config_path: str = ".codementor.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codementor.yml in the current directory
      3. AI_PROVIDER / AI_MODEL environment variables
      4. CLI argument overrides

    The result is a plain dict built once at startup and passed explicitly
    to whatever needs it; nothing here is cached at module level.
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if os.environ.get("AI_PROVIDER"):
        config["provider"] = os.environ["AI_PROVIDER"]
    if os.environ.get("AI_MODEL"):
        config["model"] = os.environ["AI_MODEL"]

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["provider"] = normalize_provider(config.get("provider"))

    # Resolve credentials from environment variables
    config["api_key"] = resolve_api_key(config["provider"])

    return config


def api_key_hint(provider: str) -> str:
    """Name the environment variable a user should set for this provider."""
    primary = API_KEY_ENV_VARS.get(provider, (GENERIC_API_KEY_ENV_VAR,))[0]
    return f"{primary} (or {GENERIC_API_KEY_ENV_VAR})"
