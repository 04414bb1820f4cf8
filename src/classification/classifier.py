# src/classification/classifier.py — v1
"""Context classifier — platform, tone and format of arbitrary input text.

Scoring is additive (2 per matching pattern, 1 per keyword hit) and the
strictly highest score wins; on equal scores the tag examined first stays,
so catalog declaration order is the tie-breaker.

Format detection runs first and is exclusive. Email needs an accumulated
score of at least 3 so that short messages with an address or a greeting
stay ``message``. The email *platform* has its own, independent threshold
of 4: a text can end up ``format=email`` with ``platform=general``.

Classification never raises; every failure path degrades to defaults.
"""

from __future__ import annotations

import logging
import re

from clipenhancer.classification.analyzer import analyze_message
from clipenhancer.classification.catalog import DEFAULT_CATALOG, PatternCatalog
from clipenhancer.core.models import (
    DEFAULT_PLATFORM,
    DEFAULT_TONE,
    ClassificationResult,
    FormatTag,
)

logger = logging.getLogger(__name__)

# Fallback heuristics used when no platform signature scores at all.
_ANY_EMOJI = re.compile("[\U0001F300-\U0001F9FF]")
_FORMAL_WORDS = re.compile(r"\b(?:therefore|however|moreover|regarding|pursuant)\b", re.I)
_INFORMAL_WORDS = re.compile(r"\b(?:gonna|wanna|gotta|kinda|sorta)\b", re.I)
_TECHNICAL_WORDS = re.compile(r"\b(?:api|backend|frontend|database|server|client)\b", re.I)
_SHORT_TEXT_CHARS = 150
_LONG_FORMAL_CHARS = 200


class ContextClassifier:
    """Score and select the best-matching platform, tone and format."""

    def __init__(self, catalog: PatternCatalog | None = None) -> None:
        self._catalog = catalog or DEFAULT_CATALOG

    @property
    def catalog(self) -> PatternCatalog:
        return self._catalog

    def classify(self, text: str) -> ClassificationResult:
        """Classify ``text``. Deterministic for a fixed catalog."""
        text = text or ""
        fmt = self.detect_format(text)
        platform, confidence = self.detect_platform(text)
        tone = self.detect_tone(text)
        used_fallback = False

        if confidence == 0:
            fb_platform, fb_tone = _fallback(text)
            if fb_platform != DEFAULT_PLATFORM or fb_tone is not None:
                used_fallback = True
                platform = fb_platform
                if tone == DEFAULT_TONE and fb_tone is not None:
                    tone = fb_tone

        result = ClassificationResult(
            platform=platform,  # type: ignore[arg-type]
            tone=tone,  # type: ignore[arg-type]
            format=fmt,
            confidence=confidence,
            used_fallback=used_fallback,
            analysis=analyze_message(text),
        )
        logger.debug(
            "Classified %d chars: format=%s platform=%s tone=%s confidence=%s fallback=%s",
            len(text), result.format, result.platform, result.tone,
            result.confidence, result.used_fallback,
        )
        return result

    def detect_format(self, text: str) -> FormatTag:
        """Structural format of ``text``; email is tested first with a score bar."""
        if self._catalog.email.score(text) >= self._catalog.email.threshold:
            return "email"
        for rule in self._catalog.format_rules:
            if rule.matches(text):
                return rule.tag  # type: ignore[return-value]
        if len(text) < self._catalog.message_max_chars:
            return "message"
        return "text"

    def detect_platform(self, text: str) -> tuple[str, int]:
        """Best platform and its score; ``('general', 0)`` when nothing scores."""
        best, best_score = DEFAULT_PLATFORM, 0
        for platform, rules in self._catalog.scored_platforms():
            score = rules.score(text)
            if platform == "email" and score < self._catalog.email_platform_threshold:
                score = 0
            if score > best_score:
                best, best_score = platform, score
        return best, best_score

    def detect_tone(self, text: str) -> str:
        """Best tone; ``'neutral'`` when nothing scores."""
        best, best_score = DEFAULT_TONE, 0
        for tone, rules in self._catalog.scored_tones():
            score = rules.score(text)
            if score > best_score:
                best, best_score = tone, score
        return best


def _fallback(text: str) -> tuple[str, str | None]:
    """Coarse platform/tone guess from text characteristics alone."""
    is_short = len(text) < _SHORT_TEXT_CHARS

    if _ANY_EMOJI.search(text) and is_short:
        return "whatsapp", "casual"
    if _FORMAL_WORDS.search(text) and len(text) > _LONG_FORMAL_CHARS:
        # The email platform stays gated behind its own threshold.
        return DEFAULT_PLATFORM, "formal"
    if _TECHNICAL_WORDS.search(text):
        return "slack", "technical"
    if _INFORMAL_WORDS.search(text) and is_short:
        return "sms", "casual"
    return DEFAULT_PLATFORM, None
