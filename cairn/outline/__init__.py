"""
Essay Outline
=============
Parsing and structural editing of essay documents: sections, blocks,
heading groups, pure text mutations, and clean export.
"""

from .sections import (
    Section,
    parse_sections,
    find_pinned,
    draggable_sections,
    pinned_boundary,
)

from .blocks import (
    Block,
    ParsedBlocks,
    OutlineBlockParser,
    parse_blocks,
    reconstruct_region,
)

from .grouping import (
    Group,
    GroupedBlocks,
    group_blocks,
)

from .mutator import (
    Extraction,
    move_section,
    remove_section,
    extract_section,
    move_block,
    remove_block,
    move_group,
    move_group_before_block,
    insert_section,
    insert_blank_section,
    insert_quoted_section,
    add_back_reference,
)

from .export import (
    OutlineStats,
    SectionWordCount,
    render_export,
    outline_stats,
    count_words,
)

__all__ = [
    # Sections
    "Section",
    "parse_sections",
    "find_pinned",
    "draggable_sections",
    "pinned_boundary",
    # Blocks
    "Block",
    "ParsedBlocks",
    "OutlineBlockParser",
    "parse_blocks",
    "reconstruct_region",
    # Groups
    "Group",
    "GroupedBlocks",
    "group_blocks",
    # Mutations
    "Extraction",
    "move_section",
    "remove_section",
    "extract_section",
    "move_block",
    "remove_block",
    "move_group",
    "move_group_before_block",
    "insert_section",
    "insert_blank_section",
    "insert_quoted_section",
    "add_back_reference",
    # Export
    "OutlineStats",
    "SectionWordCount",
    "render_export",
    "outline_stats",
    "count_words",
]
