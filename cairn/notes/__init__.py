"""
Notes
=====
Source-note preparation and distilled-note rendering.
"""

from .source_notes import (
    NOTES_HEADING,
    prepare_note_body,
    quote_heading,
    add_backlink_to_source,
    related_link_targets,
)

from .distill import (
    HighlightReference,
    render_distilled_note,
)

__all__ = [
    "NOTES_HEADING",
    "prepare_note_body",
    "quote_heading",
    "add_backlink_to_source",
    "related_link_targets",
    "HighlightReference",
    "render_distilled_note",
]
