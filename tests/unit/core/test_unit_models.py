# tests/unit/core/test_unit_models.py — v2
"""Tests for core/models.py — tag sets and domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from clipenhancer.core.models import (
    FORMATS,
    MODES,
    PLATFORMS,
    TONES,
    ClassificationResult,
    EnhancementOutcome,
    MessageAnalysis,
    ProviderConfig,
)


class TestTagSets:
    def test_defaults_are_members(self):
        assert "general" in PLATFORMS
        assert "neutral" in TONES
        assert {"message", "text"} <= set(FORMATS)

    def test_modes(self):
        assert MODES == ("agent", "general", "answer")


class TestClassificationResult:
    def test_defaults(self):
        r = ClassificationResult()
        assert (r.platform, r.tone, r.format, r.confidence) == ("general", "neutral", "message", 0.0)
        assert r.used_fallback is False
        assert isinstance(r.analysis, MessageAnalysis)

    def test_frozen(self):
        r = ClassificationResult()
        with pytest.raises(ValidationError):
            r.platform = "slack"  # type: ignore[misc]

    def test_rejects_unknown_platform(self):
        with pytest.raises(ValidationError):
            ClassificationResult(platform="myspace")  # type: ignore[arg-type]


class TestEnhancementOutcome:
    def test_ok(self):
        assert EnhancementOutcome(text="x").ok
        assert not EnhancementOutcome(error_kind="rate_limited").ok


class TestProviderConfig:
    @pytest.mark.parametrize("key", ["", "   ", "undefined", "null"])
    def test_placeholder_keys_are_not_credentials(self, key):
        assert not ProviderConfig(api_key=key).has_credentials

    def test_real_key(self):
        assert ProviderConfig(provider="gemini", api_key="AIza-123").has_credentials
