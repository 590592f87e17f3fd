from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from codementor_core.providers.base import BaseProvider


class OpenAIProvider(BaseProvider):
    NAME = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, api_key: str, **settings):
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. Install it with: pip install openai"
            )
        super().__init__(**settings)
        self.client = _OpenAI(api_key=api_key, timeout=self.timeout)

    def _call_api(self, system_prompt: str, user_prompt: str, expect_json: bool) -> str:
        request = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        # json_object mode only admits a top-level object, so it would break
        # prompts that ask for a JSON array of questions.
        if expect_json and "single json object" in user_prompt.lower():
            request["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(**request)
        if not response.choices or not response.choices[0].message.content:
            raise self._empty_reply()
        return response.choices[0].message.content
