# src/enhancement/cleanup.py — v1
"""Provider-agnostic normalization of raw model output.

Both providers occasionally echo prompt scaffolding: bracketed labels,
"Enhanced prompt:" leads, the user-prompt lead-in, the regeneration note,
or trailing "Note: ..." lines. These are stripped before format repair.
"""

from __future__ import annotations

import re

_LEADING_LABELS = [
    re.compile(p, re.I)
    for p in (
        r"^\[ENHANCED\]\s*",
        r"^\[ANSWER\]\s*",
        r"^\[AGENT_TASK\]\s*",
        r"^\[Enhanced Prompt\]\s*",
        r"^\[Enhanced Agent Prompt\]\s*",
        r"^\[Greeting Protocol\]\s*",
        r"^improved prompt:\s*",
        r"^enhanced prompt:\s*",
    )
]

_ECHOED_LEADS = [
    re.compile(p, re.I)
    for p in (
        r"^Enhance this prompt while preserving its original (?:intent|format).*?:\s*",
        r"^Reformat this for AI coding assistants.*?:\s*",
    )
]

# Trailing commentary block after the body; a leading "Note:" is content.
_TRAILING_META = re.compile(r"(?:\n\s*(?:Note|Comment|Explanation):[^\n]*)+\s*$", re.I)

_REGENERATION_NOTES = [
    re.compile(p, re.I | re.M)
    for p in (
        r"\bIf this is a (?:request|regeneration).*?different (?:version|variation).*$",
        r"\bIMPORTANT:.*?regeneration request.*$",
        r"\bThis is a regeneration request.*$",
        r"\bYou MUST provide.*?different variation.*$",
        r"\bBe creative and offer.*$",
    )
]


def strip_labels(text: str) -> str:
    """Remove leading bracketed labels and echoed lead-ins (repeatedly)."""
    previous = None
    while previous != text:
        previous = text
        for pattern in _LEADING_LABELS + _ECHOED_LEADS:
            text = pattern.sub("", text, count=1)
    return text


def clean_model_output(text: str) -> str:
    """Strip scaffolding from a raw completion. Total: never raises."""
    if not text:
        return ""
    text = strip_labels(text.strip())
    for pattern in _REGENERATION_NOTES:
        text = pattern.sub("", text)
    return _TRAILING_META.sub("", text.strip()).strip()
