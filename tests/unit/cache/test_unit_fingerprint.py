# tests/unit/cache/test_unit_fingerprint.py — v3
"""Tests for cache/fingerprint.py — text normalization and cache keys."""

from __future__ import annotations

import hashlib

from clipenhancer.cache.fingerprint import cache_key, normalize_text


class TestNormalizeText:
    def test_line_endings(self):
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_outer_whitespace(self):
        assert normalize_text("  hi there \n") == "hi there"

    def test_inner_whitespace_kept(self):
        assert normalize_text("a  b") == "a  b"


class TestCacheKey:
    def test_sha256_of_text_and_mode(self):
        expected = hashlib.sha256(b"hello|general").hexdigest()
        assert cache_key("hello", "general") == expected

    def test_normalized_inputs_share_key(self):
        assert cache_key("hello\r\n", "agent") == cache_key("hello", "agent")

    def test_mode_changes_key(self):
        assert cache_key("hello", "agent") != cache_key("hello", "general")

    def test_case_sensitive(self):
        assert cache_key("Hello", "general") != cache_key("hello", "general")
