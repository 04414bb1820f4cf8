# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a mock completion client and sample inputs. No network access:
every provider call is mocked.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.models import LLMResponse


# === FIXTURES: Sample inputs ===


@pytest.fixture
def sample_email() -> str:
    """Email with headers, body and a closing signature."""
    return (
        "From: alice@example.com\n"
        "To: bob@example.com\n"
        "Subject: Quarterly report\n"
        "\n"
        "Hi Bob,\n"
        "the report is ready, can u check the numbers before friday\n"
        "\n"
        "Regards,\n"
        "Alice"
    )


@pytest.fixture
def sample_message() -> str:
    """Short plain message with no platform markers."""
    return "can you check the numbers before the meeting tomorrow"


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response."""
    return LLMResponse(
        content="Could you check the numbers before tomorrow's meeting?",
        input_tokens=120,
        output_tokens=15,
        model="gpt-4o-mini",
        provider="openai",
        latency_ms=350,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> MagicMock:
    """Mock BaseLLMClient with default response."""
    client = MagicMock(spec=BaseLLMClient)
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    client.model = "mock-model"
    return client
