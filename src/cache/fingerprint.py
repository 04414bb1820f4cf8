# src/cache/fingerprint.py — v3
"""Deterministic cache keys for (text, mode) pairs.

Normalization is deliberately light: line endings are unified and outer
whitespace is stripped. Case and punctuation are kept because they change
what the enhancement should produce.
"""

from __future__ import annotations

import hashlib


def normalize_text(text: str) -> str:
    """Unify CRLF/CR line endings and strip leading/trailing whitespace."""
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def cache_key(text: str, mode: str) -> str:
    """SHA-256 over ``normalized_text|mode``."""
    payload = f"{normalize_text(text)}|{mode}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
