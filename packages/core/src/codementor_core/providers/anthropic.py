from __future__ import annotations

from codementor_core.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    NAME = "claude"
    DEFAULT_MODEL = "claude-3-5-sonnet-latest"

    def __init__(self, api_key: str, **settings):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. Install it with: pip install anthropic"
            )
        super().__init__(**settings)
        self.client = Anthropic(api_key=api_key, timeout=self.timeout)

    def _call_api(self, system_prompt: str, user_prompt: str, expect_json: bool) -> str:
        # The Messages API has no JSON mode; the system prompt already carries
        # the strict-JSON instruction when expect_json is set.
        response = self.client.messages.create(
            model=self.model,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text").strip()
        if not text:
            raise self._empty_reply()
        return text
