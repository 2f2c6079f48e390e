"""
Source Notes
============
Preparing source notes for the essay, and the links back from them.

A source note arrives as ``(note_name, raw_text)``. Its leading ``---``
metadata block and a leading ``# <note_name>`` title are dropped before the
rest is quoted into the essay.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from cairn.config import OUTLINE, OutlineConfig
from cairn.outline.markup import (
    ELLIPSIS,
    back_reference_line,
    parse_wikilinks,
    split_lines,
    strip_frontmatter,
    strip_title_heading,
)
from cairn.outline.sections import draggable_sections, parse_sections

NOTES_HEADING = "## Notes"

_HEADING_UNSAFE = re.compile(r"[#|\[\]]")


def prepare_note_body(note_name: str, raw_text: str) -> str:
    """Strip frontmatter and a redundant title heading; return the trimmed body."""
    body = strip_frontmatter(raw_text)
    body = strip_title_heading(body, note_name)
    return body.strip()


def quote_heading(selection: str, config: OutlineConfig = OUTLINE, prefix: str = "") -> str:
    """Derive a section heading from a quoted selection.

    Long selections are cut to ``quote_heading_length`` characters at a word
    boundary with an ellipsis; short ones use their first line. Characters
    that would break headings or links are removed.
    """
    trimmed = selection.strip()
    limit = config.quote_heading_length
    if len(trimmed) > limit:
        text = re.sub(r"\s+\S*$", "", trimmed[:limit]) + ELLIPSIS
    else:
        text = split_lines(trimmed)[0]
    return prefix + _HEADING_UNSAFE.sub("", text)


def add_backlink_to_source(source_text: str, note_name: str) -> str:
    """Append ``- [[note_name]]`` under the source note's ``## Notes`` section.

    The section is created at the end of the note when missing.
    """
    backlink = back_reference_line(note_name)
    idx = source_text.find(NOTES_HEADING)
    if idx == -1:
        return source_text.rstrip() + "\n\n" + NOTES_HEADING + "\n\n" + backlink + "\n"

    after_heading = idx + len(NOTES_HEADING)
    next_section = source_text.find("\n## ", after_heading)
    insert_at = next_section if next_section != -1 else len(source_text)
    updated = source_text[:insert_at].rstrip() + "\n" + backlink + "\n"
    if next_section != -1:
        updated += "\n" + source_text[next_section + 1 :]
    return updated


def related_link_targets(
    essay_text: str,
    exclude: Iterable[str] = (),
    config: OutlineConfig = OUTLINE,
) -> List[str]:
    """Wikilink targets in the essay body worth suggesting as new sources.

    Targets already used as section headings, or listed in ``exclude``, are
    skipped. At most ``config.max_related_notes`` targets are returned.
    """
    lines = split_lines(essay_text)
    sections = parse_sections(essay_text, config)
    headings = {s.heading for s in sections}
    skip = set(exclude)

    targets: List[str] = []
    for section in draggable_sections(sections):
        body = "\n".join(lines[section.start_line : section.end_line])
        for target in parse_wikilinks(body):
            if target in headings or target in skip or target in targets:
                continue
            targets.append(target)
            if len(targets) >= config.max_related_notes:
                return targets
    return targets

