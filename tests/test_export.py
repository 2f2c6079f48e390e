"""
Tests for clean export and word counts
======================================
"""

import pytest

from cairn.config import OUTLINE
from cairn.outline.export import count_words, outline_stats, render_export


@pytest.mark.unit
def test_export_with_headings(essay_text):
    output = render_export(essay_text, include_headings=True)

    assert output == (
        "## Alpha\n\nAlpha body.\n\n"
        "## Beta\n\n> Quoted text\n\n"
        "## Gamma\n\nGamma body."
    )


@pytest.mark.unit
def test_export_without_headings(essay_text):
    output = render_export(essay_text, include_headings=False)
    assert output == "Alpha body.\n\n> Quoted text\n\nGamma body."


@pytest.mark.unit
def test_export_default_comes_from_config(essay_text):
    config = OUTLINE.with_overrides(export_include_headings=False)
    assert render_export(essay_text, config=config) == render_export(essay_text, include_headings=False)


@pytest.mark.unit
def test_export_strips_all_link_markup():
    text = "## One\n\nSee [[A|B]] and [[C]].\n\n> quoted [[Book|*]]\n\n## Sources\n\n- [[Book]]\n"
    output = render_export(text)

    assert "[[" not in output
    assert "]]" not in output
    assert "|*" not in output
    assert "See B and C." in output
    assert "> quoted" in output
    assert "Book" not in output


@pytest.mark.unit
def test_export_excludes_preamble_and_pinned(essay_text):
    output = render_export(essay_text)
    assert "Intro line." not in output
    assert "Sources" not in output
    assert "---" not in output


@pytest.mark.unit
def test_export_with_no_sections_is_empty():
    assert render_export("just a preamble\n") == ""


@pytest.mark.unit
def test_export_collapses_blank_runs():
    output = render_export("## A\n\n\n\n\none\n\n\n\ntwo\n")
    assert output == "## A\n\none\n\ntwo"


@pytest.mark.unit
def test_count_words():
    assert count_words("") == 0
    assert count_words("  one two\nthree  ") == 3


@pytest.mark.unit
def test_outline_stats_per_section(essay_text):
    stats = outline_stats(essay_text)

    counts = {c.heading: c.words for c in stats.sections}
    assert counts == {"Alpha": 2, "Beta": 4, "Gamma": 2}
    assert stats.total_words == 8


@pytest.mark.unit
def test_outline_stats_ignores_pinned_section():
    stats = outline_stats("## Sources\n\n- [[a]]\n- [[b]]\n")
    assert stats.sections == []
    assert stats.total_words == 0
