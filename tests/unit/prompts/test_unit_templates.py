# tests/unit/prompts/test_unit_templates.py — v1
"""Tests for prompts/templates.py — template stores and default fallback."""

from __future__ import annotations

from clipenhancer.prompts.templates import (
    DEFAULT_TEMPLATES,
    FileTemplateStore,
    StaticTemplateStore,
    resolve_template,
)


class TestDefaults:
    def test_all_modes_covered(self):
        assert set(DEFAULT_TEMPLATES) == {"agent", "general", "answer"}

    def test_no_store(self):
        assert resolve_template(None, "agent") == DEFAULT_TEMPLATES["agent"]

    def test_unknown_mode_uses_general(self):
        assert resolve_template(None, "poetry") == DEFAULT_TEMPLATES["general"]


class TestStaticTemplateStore:
    def test_override(self):
        store = StaticTemplateStore({"general": "custom"})
        assert resolve_template(store, "general") == "custom"

    def test_missing_falls_back(self):
        store = StaticTemplateStore({"general": "custom"})
        assert resolve_template(store, "answer") == DEFAULT_TEMPLATES["answer"]


class TestFileTemplateStore:
    def test_mode_specific_file(self, tmp_path):
        (tmp_path / "agent-enhancement-prompt.txt").write_text("  agent file  \n")
        assert FileTemplateStore(tmp_path).load("agent") == "agent file"

    def test_shared_file(self, tmp_path):
        (tmp_path / "enhanced-system-prompt.txt").write_text("shared")
        assert FileTemplateStore(tmp_path).load("general") == "shared"

    def test_mode_file_wins_over_shared(self, tmp_path):
        (tmp_path / "general-enhancement-prompt.txt").write_text("specific")
        (tmp_path / "enhanced-system-prompt.txt").write_text("shared")
        assert FileTemplateStore(tmp_path).load("general") == "specific"

    def test_empty_file_is_absent(self, tmp_path):
        (tmp_path / "agent-enhancement-prompt.txt").write_text("   ")
        store = FileTemplateStore(tmp_path)
        assert store.load("agent") is None
        assert resolve_template(store, "agent") == DEFAULT_TEMPLATES["agent"]

    def test_missing_directory(self, tmp_path):
        assert FileTemplateStore(tmp_path / "nope").load("agent") is None
