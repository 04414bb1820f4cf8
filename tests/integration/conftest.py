# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests.

The full pipeline runs for real (classifier, composer, cache, retry,
post-processing); only the provider is replaced by ScriptedClient, a
BaseLLMClient that replays scripted replies and records every request.
"""

from __future__ import annotations

from typing import Any

import pytest

from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.models import LLMResponse, Message


class ScriptedClient(BaseLLMClient):
    """Replays ``replies`` in order; exceptions in the script are raised."""

    def __init__(self, *replies: Any) -> None:
        self._replies = list(replies)
        self.requests: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> LLMResponse:
        self.requests.append({
            "messages": messages,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model=self.model, provider=self.provider_name)

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model(self) -> str:
        return "scripted-1"


@pytest.fixture
def scripted_client():
    """Factory fixture: ``scripted_client("reply", ProviderError(...), ...)``."""
    return ScriptedClient
