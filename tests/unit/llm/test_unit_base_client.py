# tests/unit/llm/test_unit_base_client.py — v2
"""Tests for llm/base_client.py and llm/models.py — provider interface types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from clipenhancer.llm.base_client import BaseLLMClient
from clipenhancer.llm.models import LLMResponse, Message


class TestBaseLLMClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]

    def test_has_required_members(self):
        assert hasattr(BaseLLMClient, "complete")
        assert hasattr(BaseLLMClient, "provider_name")
        assert hasattr(BaseLLMClient, "model")


class TestMessage:
    def test_roles(self):
        for role in ("user", "assistant", "system"):
            assert Message(role=role, content="x").role == role

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="x")  # type: ignore[arg-type]


class TestLLMResponse:
    def test_defaults(self):
        r = LLMResponse(content="hi", model="gpt-4o-mini", provider="openai")
        assert r.input_tokens == 0
        assert r.latency_ms == 0
        assert r.raw_response is None
