"""
Block Parser
============
Classifies the lines in front of the pinned section into blocks.

Heuristics:
- A ``## `` line is a single-line heading block
- Consecutive lines starting with ``>`` form one quote block; an attribution
  sigil on the block's last line names its source
- Consecutive lines that are none of blank / heading / quote / rule form one
  prose block
- Blank lines and horizontal rules separate blocks and belong to none

Content inside or after the pinned section is bibliography and is never
parsed into blocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from cairn.config import OUTLINE, OutlineConfig
from cairn.outline.markup import (
    find_attribution,
    heading_text,
    is_blank,
    is_heading,
    is_quote,
    is_rule,
    is_separator,
    split_lines,
    truncate,
    unquote_line,
)
from cairn.outline.sections import find_pinned, parse_sections, pinned_boundary

BlockKind = Literal["heading", "quote", "prose"]


@dataclass(frozen=True)
class Block:
    """A ``[start_line, end_line)`` run of lines of one kind (0-based)."""

    kind: BlockKind
    start_line: int
    end_line: int
    preview: str
    heading: Optional[str] = None
    attribution: Optional[str] = None

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line


@dataclass(frozen=True)
class ParsedBlocks:
    """Blocks plus the line index where block parsing stopped."""

    blocks: List[Block]
    region_end: int


class OutlineBlockParser:
    """Single forward pass over the pre-pinned region; O(document length)."""

    name = "outline_block_parser"

    def __init__(self, config: OutlineConfig = OUTLINE):
        self.config = config

    def region_end(self, lines: List[str], text: str) -> int:
        return pinned_boundary(lines, find_pinned(parse_sections(text, self.config)))

    def parse(self, text: str) -> ParsedBlocks:
        if not text:
            return ParsedBlocks(blocks=[], region_end=0)

        lines = split_lines(text)
        end = self.region_end(lines, text)
        blocks: List[Block] = []
        preview_length = self.config.preview_length

        i = 0
        while i < end:
            line = lines[i]

            if is_separator(line):
                i += 1
                continue

            heading = heading_text(line)
            if heading is not None:
                blocks.append(
                    Block(
                        kind="heading",
                        start_line=i,
                        end_line=i + 1,
                        preview=truncate(heading.strip(), preview_length),
                        heading=heading,
                    )
                )
                i += 1
                continue

            start = i
            if is_quote(line):
                while i < end and is_quote(lines[i]):
                    i += 1
                blocks.append(
                    Block(
                        kind="quote",
                        start_line=start,
                        end_line=i,
                        preview=truncate(unquote_line(lines[start]), preview_length),
                        attribution=find_attribution(lines[i - 1]),
                    )
                )
                continue

            while i < end and not _ends_prose(lines[i]):
                i += 1
            blocks.append(
                Block(
                    kind="prose",
                    start_line=start,
                    end_line=i,
                    preview=truncate(lines[start].strip(), preview_length),
                )
            )

        return ParsedBlocks(blocks=blocks, region_end=end)


def _ends_prose(line: str) -> bool:
    return is_blank(line) or is_heading(line) or is_quote(line) or is_rule(line)


def parse_blocks(text: str, config: OutlineConfig = OUTLINE) -> List[Block]:
    """Convenience helper returning blocks using the outline parser."""
    return OutlineBlockParser(config).parse(text).blocks


def block_lines(text: str, block: Block) -> List[str]:
    return split_lines(text)[block.start_line : block.end_line]


def reconstruct_region(text: str, parsed: ParsedBlocks) -> List[str]:
    """Rebuild the parsed region from block ranges and the separators between them.

    Raises:
        ValueError: If a gap between blocks holds anything but separators.
    """
    lines = split_lines(text)
    out: List[str] = []
    cursor = 0
    for block in parsed.blocks:
        gap = lines[cursor : block.start_line]
        if not all(is_separator(line) for line in gap):
            raise ValueError(f"Non-separator content between lines {cursor} and {block.start_line}")
        out.extend(gap)
        out.extend(lines[block.start_line : block.end_line])
        cursor = block.end_line
    tail = lines[cursor : parsed.region_end]
    if not all(is_separator(line) for line in tail):
        raise ValueError(f"Non-separator content after line {cursor}")
    out.extend(tail)
    return out
