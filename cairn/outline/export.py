"""
Export Renderer
===============
Flattens the essay (everything but the pinned section) into clean text and
computes word counts for the outline.

Export steps:
- keep only non-pinned sections, optionally dropping their heading lines
- join sections with a blank line
- remove attribution sigils, unwrap remaining wikilinks
- collapse runs of blank lines to one, trim the result
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from cairn.config import OUTLINE, OutlineConfig
from cairn.outline.markup import is_heading, is_rule, split_lines, strip_attributions, unwrap_wikilinks
from cairn.outline.sections import Section, clamped_end, draggable_sections, find_pinned, parse_sections, pinned_boundary

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def _essay_sections(lines: List[str], text: str, config: OutlineConfig) -> Iterator[Tuple[Section, List[str]]]:
    """Draggable sections with their lines, minus the padding above the pinned section."""
    sections = parse_sections(text, config)
    boundary = pinned_boundary(lines, find_pinned(sections))
    for section in draggable_sections(sections):
        yield section, lines[section.start_line : clamped_end(section, boundary)]


def render_export(text: str, include_headings: Optional[bool] = None, config: OutlineConfig = OUTLINE) -> str:
    """Render the non-pinned sections as plain text.

    Args:
        text: Full essay text
        include_headings: Keep ``## `` heading lines; defaults to
            ``config.export_include_headings``
        config: Outline conventions

    Returns:
        Export text; empty when the essay has no draggable sections
    """
    if include_headings is None:
        include_headings = config.export_include_headings

    lines = split_lines(text)
    parts: List[str] = []
    for _, section_lines in _essay_sections(lines, text, config):
        if not include_headings:
            section_lines = [line for line in section_lines if not is_heading(line)]
        parts.append("\n".join(section_lines))

    output = "\n\n".join(parts)
    output = strip_attributions(output)
    output = unwrap_wikilinks(output)
    output = _EXCESS_BLANK_LINES.sub("\n\n", output)
    return output.strip()


def count_words(text: str) -> int:
    return len(text.split())


@dataclass(frozen=True)
class SectionWordCount:
    heading: str
    words: int


@dataclass(frozen=True)
class OutlineStats:
    """Word counts over section bodies; headings and the pinned section excluded."""

    total_words: int
    sections: List[SectionWordCount]


def outline_stats(text: str, config: OutlineConfig = OUTLINE) -> OutlineStats:
    lines = split_lines(text)
    counts = [
        SectionWordCount(
            heading=section.heading,
            words=count_words(" ".join(line for line in section_lines[1:] if not is_rule(line))),
        )
        for section, section_lines in _essay_sections(lines, text, config)
    ]
    return OutlineStats(total_words=sum(c.words for c in counts), sections=counts)
