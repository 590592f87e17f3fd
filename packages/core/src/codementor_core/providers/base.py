"""Base provider implementing the Template Method pattern.

All providers share the same completion algorithm:
    complete() → _build_system_prompt()
               → _call_with_retry() → _call_api()   ← only this differs per provider

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

Interpreting the text (JSON extraction, repair, defaults) is not a provider
concern; it lives in codementor_core.extractor.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from codementor_core.utils.code import display_name

logger = logging.getLogger(__name__)

# Shared defaults — subclasses may override as class attributes if needed.
_MAX_RETRIES = 3
_MAX_TOKENS = 4000
_TEMPERATURE = 0.3
_TIMEOUT = 30


class ProviderError(RuntimeError):
    """Raised when a provider cannot produce a text reply."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class BaseProvider(ABC):
    NAME: str = "base"
    DEFAULT_MODEL: str = ""
    MAX_RETRIES: int = _MAX_RETRIES

    def __init__(
        self,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        language: str = "go",
    ):
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or _MAX_TOKENS
        self.temperature = _TEMPERATURE if temperature is None else temperature
        self.timeout = timeout or _TIMEOUT
        self.language = language

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def complete(self, prompt: str, expect_json: bool = False) -> str:
        """Send one prompt and return the model's raw text reply.

        Raises ProviderError when every attempt fails.
        """
        system = self._build_system_prompt(expect_json)
        return self._call_with_retry(system, prompt, expect_json)

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str, expect_json: bool) -> str:
        """Make a single API call and return the raw text response.

        This is the only method subclasses must implement. It should raise
        on failure — _call_with_retry handles retries and logging.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _call_with_retry(self, system_prompt: str, user_prompt: str, expect_json: bool) -> str:
        """Retry _call_api up to MAX_RETRIES times with exponential backoff."""
        for attempt in range(self.MAX_RETRIES):
            try:
                return self._call_api(system_prompt, user_prompt, expect_json)
            except Exception as e:
                if attempt == self.MAX_RETRIES - 1:
                    logger.error(
                        "%s API failed after %d attempts: %s",
                        self.__class__.__name__,
                        self.MAX_RETRIES,
                        e,
                    )
                    raise ProviderError(self.NAME, str(e)) from e
                delay = 2**attempt
                logger.warning(
                    "%s API error (attempt %d/%d): %s. Retrying in %ds...",
                    self.__class__.__name__,
                    attempt + 1,
                    self.MAX_RETRIES,
                    e,
                    delay,
                )
                time.sleep(delay)
        raise ProviderError(self.NAME, "no attempts were made")

    def _build_system_prompt(self, expect_json: bool) -> str:
        """Build the system prompt sent alongside every request.

        The JSON instruction is repeated here because the task prompt alone
        is not always enough to keep models from adding markdown.
        """
        system = f"You are a senior {display_name(self.language)} interviewer. Be concise."
        if expect_json:
            system += " Respond ONLY with strict JSON. No markdown."
        return system

    def _empty_reply(self) -> RuntimeError:
        return RuntimeError(f"no response from {self.NAME}")
