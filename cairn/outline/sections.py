"""
Section Parser
==============
Splits an essay into level-2 heading sections.

A section runs from its ``## `` heading line up to (not including) the next
heading, or to end-of-document. The first section whose heading matches the
configured pinned name is the pinned (bibliography) section; it always sorts
last and is never dragged. Content before the first heading belongs to no
section.

Sections are derived fresh from text on every call and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from cairn.config import OUTLINE, OutlineConfig
from cairn.outline.markup import heading_text, is_blank, is_rule, split_lines


@dataclass(frozen=True)
class Section:
    """A ``[start_line, end_line)`` range beginning at a heading line (0-based)."""

    heading: str
    start_line: int
    end_line: int
    pinned: bool = False

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line


def is_pinned_heading(heading: str, config: OutlineConfig = OUTLINE) -> bool:
    return heading.strip().casefold() == config.pinned_section_name.strip().casefold()


def parse_sections(text: str, config: OutlineConfig = OUTLINE) -> List[Section]:
    """Parse level-2 heading sections in document order.

    Duplicate headings produce independent sections. Only the first heading
    matching the pinned name is flagged ``pinned``.
    """
    if not text:
        return []

    lines = split_lines(text)
    sections: List[Section] = []
    open_heading: Optional[str] = None
    open_start = 0
    pinned_seen = False

    def close(end: int) -> None:
        nonlocal pinned_seen
        if open_heading is None:
            return
        pinned = not pinned_seen and is_pinned_heading(open_heading, config)
        pinned_seen = pinned_seen or pinned
        sections.append(Section(heading=open_heading, start_line=open_start, end_line=end, pinned=pinned))

    for idx, line in enumerate(lines):
        heading = heading_text(line)
        if heading is None:
            continue
        close(idx)
        open_heading = heading
        open_start = idx

    close(len(lines))
    return sections


def find_pinned(sections: List[Section]) -> Optional[Section]:
    return next((s for s in sections if s.pinned), None)


def draggable_sections(sections: List[Section]) -> List[Section]:
    """Sections that can be moved, removed, or extracted (all but the pinned one)."""
    return [s for s in sections if not s.pinned]


def pinned_boundary(lines: List[str], pinned: Optional[Section]) -> int:
    """Line index where content in front of the pinned section ends.

    Walks back from the pinned heading over blank lines, one horizontal rule,
    and the blank lines above that rule. Without a pinned section this is the
    document length.
    """
    if pinned is None:
        return len(lines)

    idx = pinned.start_line
    while idx > 0 and is_blank(lines[idx - 1]):
        idx -= 1
    if idx > 0 and is_rule(lines[idx - 1]):
        idx -= 1
        while idx > 0 and is_blank(lines[idx - 1]):
            idx -= 1
    return idx


def clamped_end(section: Section, boundary: int) -> int:
    """End of a section, excluding the padding in front of the pinned section."""
    if section.start_line < boundary < section.end_line:
        return boundary
    return section.end_line


def section_body_lines(lines: List[str], section: Section, boundary: Optional[int] = None) -> List[str]:
    """Body lines of a section (heading excluded), surrounding blank lines trimmed."""
    end = section.end_line if boundary is None else clamped_end(section, boundary)
    body = list(lines[section.start_line + 1 : end])
    while body and is_blank(body[0]):
        body.pop(0)
    while body and is_blank(body[-1]):
        body.pop()
    return body


def section_text(text: str, section: Section) -> str:
    return "\n".join(split_lines(text)[section.start_line : section.end_line])
