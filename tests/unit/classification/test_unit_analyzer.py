# tests/unit/classification/test_unit_analyzer.py — v1
"""Tests for classification/analyzer.py — message size, flags and domain."""

from __future__ import annotations

from clipenhancer.classification.analyzer import analyze_message


class TestAnalyzeMessage:
    def test_programming_question(self):
        a = analyze_message("How do I write a function?")
        assert a.words == 6
        assert a.is_question
        assert a.contains_code
        assert a.domain == "programming"
        assert a.is_brief
        assert a.length_label == "Brief"

    def test_business_domain(self):
        assert analyze_message("Our sales grew last month").domain == "business"

    def test_academic_domain(self):
        assert analyze_message("A research paper on bees").domain == "academic"

    def test_general_domain(self):
        a = analyze_message("see you tomorrow")
        assert a.domain == "general"
        assert not a.is_question
        assert not a.contains_code

    def test_detailed(self):
        a = analyze_message("word " * 101)
        assert a.is_detailed
        assert not a.is_brief
        assert a.length_label == "Detailed"

    def test_moderate(self):
        a = analyze_message("word " * 50)
        assert a.length_label == "Moderate"

    def test_fenced_code(self):
        assert analyze_message("```\nx = 1\n```").contains_code

    def test_empty(self):
        a = analyze_message("")
        assert a.characters == 0
        assert a.words == 0
        assert a.domain == "general"
