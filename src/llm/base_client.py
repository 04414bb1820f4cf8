# src/llm/base_client.py — v2
"""Abstract completion-provider interface.

Adapters must raise ``ProviderError`` (llm/errors.py) carrying HTTP-like
status/code/type so the orchestrator can classify failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from clipenhancer.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all completion providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, google)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model the adapter sends requests to."""
