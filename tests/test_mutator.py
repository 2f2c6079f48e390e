"""
Tests for the structural mutator
================================
"""

from collections import Counter

import pytest

from cairn.config import OUTLINE
from cairn.errors import EmptyExtraction
from cairn.outline import mutator
from cairn.outline.blocks import parse_blocks
from cairn.outline.markup import is_separator, split_lines
from cairn.outline.sections import find_pinned, parse_sections


def _content_lines(text):
    return Counter(line for line in split_lines(text) if not is_separator(line))


def _pinned_is_last(text):
    sections = parse_sections(text)
    return sections[-1].pinned and sections[-1].heading == "Sources"


# ── Sections ──


@pytest.mark.unit
def test_move_section_example(simple_essay_text):
    result = mutator.move_section(simple_essay_text, 0, 1)

    assert [s.heading for s in parse_sections(result)] == ["B", "A", "Sources"]
    assert result == "## B\nbeta\n\n## A\nalpha\n\n## Sources\n\n- [[x]]\n"


@pytest.mark.unit
def test_move_section_down_keeps_rule_with_pinned(essay_text):
    result = mutator.move_section(essay_text, 0, 2)

    assert result == (
        "# Draft\n\nIntro line.\n\n"
        "## Beta\n\n> Quoted text [[Src|*]]\n\n"
        "## Gamma\n\nGamma body.\n\n"
        "## Alpha\n\nAlpha body.\n\n"
        "---\n\n## Sources\n\n- [[Src]]\n"
    )


@pytest.mark.unit
def test_move_section_up_from_above_pinned(essay_text):
    result = mutator.move_section(essay_text, 2, 0)

    assert result == (
        "# Draft\n\nIntro line.\n\n"
        "## Gamma\n\nGamma body.\n\n"
        "## Alpha\n\nAlpha body.\n\n"
        "## Beta\n\n> Quoted text [[Src|*]]\n\n"
        "---\n\n## Sources\n\n- [[Src]]\n"
    )


@pytest.mark.unit
@pytest.mark.parametrize("index", [0, 1, 2])
def test_move_section_onto_itself_is_identity(essay_text, index):
    assert mutator.move_section(essay_text, index, index) == essay_text


@pytest.mark.unit
@pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 3), (5, 1), (0, 99)])
def test_move_section_out_of_range_is_noop(essay_text, from_index, to_index):
    assert mutator.move_section(essay_text, from_index, to_index) == essay_text


@pytest.mark.unit
@pytest.mark.parametrize("from_index,to_index", [(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)])
def test_move_section_conserves_lines_and_pinned(essay_text, from_index, to_index):
    result = mutator.move_section(essay_text, from_index, to_index)

    assert _content_lines(result) == _content_lines(essay_text)
    assert _pinned_is_last(result)


@pytest.mark.unit
def test_remove_section_shrinks_by_one(essay_text):
    result = mutator.remove_section(essay_text, 1)

    headings = [s.heading for s in parse_sections(result)]
    assert headings == ["Alpha", "Gamma", "Sources"]
    assert "Beta" not in result
    assert "Alpha body.\n\n## Gamma" in result


@pytest.mark.unit
def test_remove_section_out_of_range_is_noop(essay_text):
    assert mutator.remove_section(essay_text, 3) == essay_text


@pytest.mark.unit
def test_remove_section_next_to_pinned_keeps_rule(essay_text):
    result = mutator.remove_section(essay_text, 2)
    assert result.endswith("> Quoted text [[Src|*]]\n\n---\n\n## Sources\n\n- [[Src]]\n")


@pytest.mark.unit
def test_remove_only_section_drops_dangling_rule():
    text = "## A\nalpha\n\n---\n\n## Sources\n\n- [[x]]\n"
    assert mutator.remove_section(text, 0) == "## Sources\n\n- [[x]]\n"


@pytest.mark.unit
def test_remove_section_collapses_blank_run_at_edit_point_only():
    text = "## A\nalpha\n\n\n\n\n## B\nbeta\n\n## C\ngamma\n\n\n\n## D\ndelta\n"
    result = mutator.remove_section(text, 1)

    assert result.startswith("## A\nalpha\n\n## C\n")
    assert "gamma\n\n\n\n## D" in result


@pytest.mark.unit
def test_extract_section_returns_body_without_heading(essay_text):
    extraction = mutator.extract_section(essay_text, 2)

    assert extraction.heading == "Gamma"
    assert extraction.body == "Gamma body."
    assert extraction.section_index == 2


@pytest.mark.unit
def test_extract_empty_section_raises():
    with pytest.raises(EmptyExtraction):
        mutator.extract_section("## Empty\n\n", 0)


@pytest.mark.unit
def test_extract_section_out_of_range_returns_none(essay_text):
    assert mutator.extract_section(essay_text, 3) is None


# ── Blocks and groups ──


@pytest.mark.unit
def test_move_block_into_another_group(essay_text):
    result = mutator.move_block(essay_text, 5, 3)

    assert result == (
        "# Draft\n\nIntro line.\n\n"
        "## Alpha\n\n> Quoted text [[Src|*]]\n\nAlpha body.\n\n"
        "## Beta\n\n"
        "## Gamma\n\nGamma body.\n\n"
        "---\n\n## Sources\n\n- [[Src]]\n"
    )


@pytest.mark.unit
@pytest.mark.parametrize("from_index,to_index", [(0, 7), (7, 0), (3, 5), (5, 6), (2, 4)])
def test_move_block_conserves_lines(essay_text, from_index, to_index):
    result = mutator.move_block(essay_text, from_index, to_index)

    assert result != essay_text
    assert _content_lines(result) == _content_lines(essay_text)
    assert _pinned_is_last(result)


@pytest.mark.unit
def test_move_block_onto_itself_is_identity(essay_text):
    assert mutator.move_block(essay_text, 4, 4) == essay_text


@pytest.mark.unit
def test_remove_block_shrinks_by_one(essay_text):
    result = mutator.remove_block(essay_text, 5)

    assert len(parse_blocks(result)) == len(parse_blocks(essay_text)) - 1
    assert "## Beta\n\n## Gamma" in result
    assert "- [[Src]]" in result


@pytest.mark.unit
def test_move_group_matches_section_move(essay_text):
    assert mutator.move_group(essay_text, 0, 2) == mutator.move_section(essay_text, 0, 2)


@pytest.mark.unit
def test_move_group_out_of_range_is_noop(essay_text):
    assert mutator.move_group(essay_text, 0, 3) == essay_text


@pytest.mark.unit
def test_move_group_before_earlier_block(essay_text):
    result = mutator.move_group_before_block(essay_text, 1, 2)

    assert [s.heading for s in parse_sections(result)] == ["Beta", "Alpha", "Gamma", "Sources"]
    assert "## Beta\n\n> Quoted text [[Src|*]]\n\n## Alpha" in result


@pytest.mark.unit
def test_move_group_to_end_of_block_region(essay_text):
    blocks = parse_blocks(essay_text)
    result = mutator.move_group_before_block(essay_text, 0, len(blocks))
    assert result == mutator.move_section(essay_text, 0, 2)


@pytest.mark.unit
def test_move_group_before_orphan_block(essay_text):
    result = mutator.move_group_before_block(essay_text, 2, 0)
    assert result.startswith("## Gamma\n\nGamma body.\n\n# Draft\n")
    assert _pinned_is_last(result)


@pytest.mark.unit
@pytest.mark.parametrize("block_index", [4, 5, 6])
def test_move_group_into_itself_is_noop(essay_text, block_index):
    # Group 1 covers blocks 4..5; block 6 is directly after it
    assert mutator.move_group_before_block(essay_text, 1, block_index) == essay_text


# ── Inserts ──


@pytest.mark.unit
def test_insert_creates_pinned_section_lazily():
    result = mutator.insert_quoted_section("## Intro\n\nHello.\n", "Note", "body", "Note")

    assert result == (
        "## Intro\n\nHello.\n\n"
        "## Note\n\n> body [[Note|*]]\n\n"
        "---\n\n## Sources\n\n- [[Note]]\n"
    )
    sections = parse_sections(result)
    assert sum(1 for s in sections if s.pinned) == 1
    assert result.count("- [[") == 1


@pytest.mark.unit
def test_insert_lands_before_pinned_and_adds_reference():
    first = mutator.insert_quoted_section("## Intro\n\nHello.\n", "Note", "body", "Note")
    result = mutator.insert_quoted_section(first, "Other", "x", "Other")

    assert result == (
        "## Intro\n\nHello.\n\n"
        "## Note\n\n> body [[Note|*]]\n\n"
        "## Other\n\n> x [[Other|*]]\n\n"
        "---\n\n## Sources\n\n- [[Note]]\n- [[Other]]\n"
    )


@pytest.mark.unit
def test_insert_same_source_twice_keeps_one_reference(essay_text):
    result = mutator.insert_quoted_section(essay_text, "More", "again", "Src")
    assert result.count("- [[Src]]") == 1
    assert _pinned_is_last(result)


@pytest.mark.unit
def test_insert_multiline_quote_attributes_last_line():
    result = mutator.insert_quoted_section("", "Q", "line one\n\nline two", "Book")
    assert "> line one\n>\n> line two [[Book|*]]" in result


@pytest.mark.unit
def test_insert_uses_configured_pinned_name():
    config = OUTLINE.with_overrides(pinned_section_name="References")
    result = mutator.insert_quoted_section("", "Q", "body", "Book", config)

    pinned = find_pinned(parse_sections(result, config))
    assert pinned.heading == "References"


@pytest.mark.unit
def test_insert_blank_section_on_empty_document():
    assert mutator.insert_blank_section("") == "## New Section\n"


@pytest.mark.unit
def test_insert_blank_section_goes_before_pinned(simple_essay_text):
    result = mutator.insert_blank_section(simple_essay_text)
    assert "beta\n\n## New Section\n\n## Sources" in result


@pytest.mark.unit
def test_add_back_reference_is_byte_preserving(essay_text):
    result = mutator.add_back_reference(essay_text, "Alpha")
    assert result == essay_text.replace("- [[Src]]\n", "- [[Src]]\n- [[Alpha]]\n")


@pytest.mark.unit
def test_add_back_reference_to_heading_only_pinned():
    result = mutator.add_back_reference("## A\nx\n\n## Sources\n", "New")
    assert result == "## A\nx\n\n## Sources\n\n- [[New]]\n"


@pytest.mark.unit
def test_add_back_reference_existing_entry_is_noop(essay_text):
    assert mutator.add_back_reference(essay_text, "Src") == essay_text
