"""
Distilled Notes
===============
Rendering of atomic notes distilled from a highlight.

The highlight metadata (author, source title, highlight link) is produced
upstream; it is threaded through here as literal text under the
``## Reference`` heading and never parsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from cairn.outline.markup import QUOTE_MARKER, heading_line, wikilink

REFERENCE_HEADING = "Reference"


@dataclass(frozen=True)
class HighlightReference:
    """Upstream highlight metadata, kept verbatim."""

    author: str = ""
    source_title: str = ""
    link_markup: str = ""


def render_distilled_note(
    idea: str,
    quote: str,
    source_name: str,
    reference: Optional[HighlightReference] = None,
) -> str:
    """Render a distilled note: the idea, then the quote and its provenance."""
    lines: List[str] = []
    if idea.strip():
        lines.append(idea.strip())

    lines.extend(["", heading_line(REFERENCE_HEADING), ""])
    lines.append(f"{QUOTE_MARKER}{quote.strip()}")
    lines.append("")
    lines.append(f"- Source: {wikilink(source_name)}")

    if reference is not None:
        if reference.source_title and reference.source_title != source_name:
            lines.append(f"- Title: {reference.source_title}")
        if reference.author:
            lines.append(f"- Author: {reference.author}")
        if reference.link_markup:
            lines.append(f"- {reference.link_markup}")

    lines.append("")
    return "\n".join(lines)
