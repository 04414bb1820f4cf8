# src/llm/adapters/openai_adapter.py — v2
"""OpenAI chat-completions adapter implementing BaseLLMClient.

Uses the official openai SDK. SDK-level retries are disabled; the retry
policy lives in llm/retry.py. SDK exceptions are translated to ProviderError.
"""

from __future__ import annotations

import time
from typing import Any

from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.errors import ProviderError
from clipenhancer.llm.models import LLMResponse, Message

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
OPENAI_MODELS = ("gpt-3.5-turbo", "gpt-4", "gpt-4o", "gpt-4o-mini")


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(
        self,
        model: str = DEFAULT_OPENAI_MODEL,
        api_key: str = "",
        timeout_s: float = 60.0,
        **kwargs: Any,
    ):
        self._model = model or DEFAULT_OPENAI_MODEL
        self._api_key = api_key
        self._timeout_s = timeout_s

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(
            api_key=self._api_key, timeout=self._timeout_s, max_retries=0,
        )
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        t0 = time.monotonic()
        try:
            resp = await client.chat.completions.create(
                model=self._model,
                messages=oai_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIStatusError as e:
            raise ProviderError(
                e.message,
                status=e.status_code,
                code=e.code,
                type=e.type,
                provider="openai",
            ) from e
        except openai.APITimeoutError as e:
            raise ProviderError(str(e), code="timeout", provider="openai") from e
        except openai.APIConnectionError as e:
            raise ProviderError(str(e), code="connection_error", provider="openai") from e
        latency = int((time.monotonic() - t0) * 1000)

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=(choice.message.content or "").strip(),
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model
