# src/llm/adapters/google_adapter.py — v2
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. api_core exceptions carry the HTTP status
in ``.code`` and are translated to ProviderError.
"""

from __future__ import annotations

import time
from typing import Any

from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.errors import ProviderError
from clipenhancer.llm.models import LLMResponse, Message

DEFAULT_GEMINI_MODEL = "gemini-1.5-pro-latest"
GEMINI_MODELS = (
    "gemini-pro", "gemini-1.5-pro", "gemini-1.5-flash",
    "gemini-1.5-pro-latest", "gemini-ultra",
)


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = DEFAULT_GEMINI_MODEL, api_key: str = "", **kwargs: Any):
        self._model = model or DEFAULT_GEMINI_MODEL
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import google.generativeai as genai
        from google.api_core import exceptions as gexc

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        gen_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }

        # Convert messages to Gemini format
        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        try:
            resp = await model.generate_content_async(
                contents, generation_config=gen_config,
            )
            text = resp.text or ""
        except gexc.RetryError as e:
            raise ProviderError(str(e), code="timeout", provider="google") from e
        except gexc.GoogleAPICallError as e:
            status = e.code if isinstance(e.code, int) else None
            raise ProviderError(e.message or str(e), status=status, provider="google") from e
        except ValueError as e:
            # resp.text raises when the candidate was blocked or empty
            raise ProviderError(str(e), code="empty_response", provider="google") from e
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=text.strip(),
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"

    @property
    def model(self) -> str:
        return self._model
