"""Mentor service: code review, interview questions, hints and chat.

Every public method returns usable data. A missing API key or a failing
provider is reported inside the result rather than raised, so the caller
(a web handler, the CLI) can always render something.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from codementor_core import prompts
from codementor_core.config import api_key_hint
from codementor_core.extractor import extract_questions, extract_review, extract_text
from codementor_core.models import ChatMessage, ChatResponse, Challenge, ComplexityAnalysis, ReviewResult
from codementor_core.providers.anthropic import AnthropicProvider
from codementor_core.providers.base import BaseProvider, ProviderError
from codementor_core.providers.gemini import GeminiProvider
from codementor_core.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[BaseProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "claude": AnthropicProvider,
}

DEFAULT_HINT = "Consider the problem step by step. What's the core requirement here?"


def get_provider(config: dict) -> BaseProvider:
    name = config["provider"]
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(f"Unknown AI provider: {name!r}. Choose 'gemini', 'openai' or 'claude'.")
    return provider_cls(
        api_key=config["api_key"],
        model=config.get("model"),
        max_tokens=config.get("max_tokens"),
        temperature=config.get("temperature"),
        timeout=config.get("timeout"),
        language=config.get("language") or "go",
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unscored_review(feedback: str, follow_up: str, optimized_approach: str, test_coverage: str) -> ReviewResult:
    """A review produced without calling a model; scores stay at 0."""
    return ReviewResult(
        overall_score=0,
        interviewer_feedback=feedback,
        follow_up_questions=[follow_up],
        complexity=ComplexityAnalysis(
            time_complexity="N/A",
            space_complexity="N/A",
            can_optimize=False,
            optimized_approach=optimized_approach,
        ),
        readability_score=0,
        test_coverage=test_coverage,
    )


class MentorService:
    """Facade over one configured provider.

    The provider is chosen once from ``config`` at construction time. When
    no API key is configured no provider is built and every method answers
    with a setup message without touching the network.
    """

    def __init__(self, config: dict, provider: BaseProvider | None = None):
        self.config = config
        self.language = config.get("language") or "go"
        if provider is None and config.get("api_key"):
            provider = get_provider(config)
        self.provider = provider

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def _missing_key_message(self, feature: str = "AI features") -> str:
        return f"{feature} require an API key. Set {api_key_hint(self.config.get('provider', 'gemini'))}."

    # ------------------------------------------------------------------ #
    # Operations                                                           #
    # ------------------------------------------------------------------ #

    def review_code(self, code: str, challenge: Challenge | None, context: str = "") -> ReviewResult:
        if not self.enabled:
            return _unscored_review(
                feedback=self._missing_key_message(),
                follow_up="Would you like to set up AI code review?",
                optimized_approach="Set up your API key first",
                test_coverage="API key required for AI analysis",
            )

        prompt = self.build_review_prompt(code, challenge, context)
        try:
            response = self.provider.complete(prompt, expect_json=True)
        except ProviderError as e:
            return _unscored_review(
                feedback=f"AI service temporarily unavailable: {e}. Please try again later.",
                follow_up="Would you like to try again?",
                optimized_approach="API service temporarily unavailable",
                test_coverage="AI service unavailable",
            )

        return extract_review(response)

    def interviewer_questions(self, code: str, challenge: Challenge | None, user_progress: str = "") -> list[str]:
        if not self.enabled:
            return [self._missing_key_message()]

        prompt = prompts.build_question_prompt(code, challenge, user_progress, self.language)
        try:
            response = self.provider.complete(prompt, expect_json=True)
        except ProviderError as e:
            return [f"AI service unavailable: {e}"]

        return extract_questions(response)

    def code_hint(self, code: str, challenge: Challenge | None, hint_level: int = 1, context: str = "") -> str:
        if not self.enabled:
            return self._missing_key_message()

        prompt = prompts.build_hint_prompt(code, challenge, hint_level, context)
        try:
            response = self.provider.complete(prompt)
        except ProviderError as e:
            return f"AI service unavailable: {e}"

        return extract_text(response, fallback=DEFAULT_HINT)

    def chat(
        self,
        message: str,
        challenge: Challenge | None = None,
        history: Sequence[ChatMessage] = (),
        code_context: str = "",
    ) -> ChatResponse:
        if not self.enabled:
            return ChatResponse(
                message=self._missing_key_message("AI chat"),
                success=False,
                error="API key not configured",
                timestamp=_now(),
            )

        prompt = prompts.build_chat_prompt(message, challenge, history, code_context, self.language)
        try:
            response = self.provider.complete(prompt)
        except ProviderError as e:
            return ChatResponse(
                message="I'm having trouble connecting right now. Please try again in a moment.",
                success=False,
                error=str(e),
                timestamp=_now(),
            )

        return ChatResponse(
            message=extract_text(response),
            success=True,
            timestamp=_now(),
            context=prompts.context_description(challenge, self.language),
            suggestions=prompts.follow_up_suggestions(message),
        )

    # ------------------------------------------------------------------ #
    # Debug helpers                                                        #
    # ------------------------------------------------------------------ #

    def build_review_prompt(self, code: str, challenge: Challenge | None, context: str = "") -> str:
        return prompts.build_review_prompt(code, challenge, context, self.language)

    def call_raw(self, prompt: str, expect_json: bool = True) -> str:
        """Send a prompt and return the unprocessed reply. Raises ProviderError."""
        if not self.enabled:
            raise ProviderError(self.config.get("provider", "unknown"), "no API key configured")
        return self.provider.complete(prompt, expect_json=expect_json)
