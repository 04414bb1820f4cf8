# src/classification/analyzer.py — v1
"""Message analyzer — size, question/code flags and subject domain.

Feeds the context block of the composed system prompt.
"""

from __future__ import annotations

import re

from clipenhancer.core.models import DomainTag, MessageAnalysis

_CODE_HINT = re.compile(r"\b(?:function|class|const|let|var|import|export)\b")

# Checked in order; first hit wins.
_DOMAIN_KEYWORDS: tuple[tuple[DomainTag, tuple[str, ...]], ...] = (
    ("programming", ("code", "programming", "function")),
    ("business", ("business", "marketing", "sales")),
    ("academic", ("science", "research", "study")),
)

BRIEF_MAX_WORDS = 30
DETAILED_MIN_WORDS = 100


def analyze_message(text: str) -> MessageAnalysis:
    """Describe the coarse shape of ``text``."""
    words = len(text.split())
    return MessageAnalysis(
        characters=len(text),
        words=words,
        is_brief=words < BRIEF_MAX_WORDS,
        is_detailed=words > DETAILED_MIN_WORDS,
        is_question="?" in text,
        contains_code="```" in text or _CODE_HINT.search(text) is not None,
        domain=_detect_domain(text),
    )


def _detect_domain(text: str) -> DomainTag:
    lowered = text.lower()
    for domain, keywords in _DOMAIN_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            return domain
    return "general"
