from __future__ import annotations

try:
    from google import genai as _genai
    from google.genai import types as _genai_types
except ImportError:
    _genai = None  # type: ignore[assignment]
    _genai_types = None  # type: ignore[assignment]

from codementor_core.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    NAME = "gemini"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(self, api_key: str, **settings):
        if _genai is None:
            raise ImportError(
                "The 'google-genai' package is required for this provider. Install it with: pip install google-genai"
            )
        super().__init__(**settings)
        self.client = _genai.Client(
            api_key=api_key,
            http_options=_genai_types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def _call_api(self, system_prompt: str, user_prompt: str, expect_json: bool) -> str:
        config = _genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            response_mime_type="application/json" if expect_json else None,
        )
        response = self.client.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=config,
        )
        text = getattr(response, "text", None)
        if not text:
            raise self._empty_reply()
        return text
