"""
Structural Mutator
==================
Pure text -> text operations over an essay document.

Every operation follows the same pattern:
1. compute the line range to remove and splice it out
2. re-parse the remainder to resolve the insertion point
3. splice the payload back in with exactly one blank line around it
4. return a brand-new document string

Invalid requests (out-of-range index, moving a unit onto itself) return the
input text unchanged. The pinned section keeps its position after every
move and insert; the blank lines and horizontal rule in front of it stay
with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from cairn.config import OUTLINE, OutlineConfig
from cairn.errors import EmptyExtraction
from cairn.outline.blocks import OutlineBlockParser
from cairn.outline.grouping import group_blocks
from cairn.outline.markup import (
    RULE,
    back_reference_line,
    heading_line,
    is_blank,
    join_lines,
    quote_lines,
    split_lines,
    wikilink,
)
from cairn.outline.sections import (
    Section,
    clamped_end,
    draggable_sections,
    find_pinned,
    parse_sections,
    pinned_boundary,
    section_body_lines,
)


@dataclass(frozen=True)
class Extraction:
    """Body of a section copied out for a new note."""

    heading: str
    body: str
    section_index: int


# ── Line helpers ─────────────────────────────────────────────


def _lines(text: str) -> List[str]:
    return split_lines(text) if text else []


def _trim_blank_edges(lines: Sequence[str], head: bool = True, tail: bool = True) -> List[str]:
    out = list(lines)
    if tail:
        while out and is_blank(out[-1]):
            out.pop()
    if head:
        while out and is_blank(out[0]):
            out.pop(0)
    return out


def _finish(lines: Sequence[str]) -> str:
    text = join_lines(list(lines)).rstrip()
    return text + "\n" if text else ""


def _excise(lines: List[str], start: int, end: int) -> List[str]:
    """Remove ``[start, end)`` and collapse the blank run left at the splice point."""
    out = lines[:start] + lines[end:]

    lo = start
    while lo > 0 and is_blank(out[lo - 1]):
        lo -= 1
    hi = start
    while hi < len(out) and is_blank(out[hi]):
        hi += 1

    between_content = lo > 0 and hi < len(out)
    out[lo:hi] = [""] if between_content else []
    return out


def _join_parts(parts: Sequence[Sequence[str]]) -> str:
    """Join non-empty line groups with exactly one blank line between each."""
    return _finish(["\n\n".join(join_lines(list(p)) for p in parts if p)])


def _splice_in(lines: List[str], insert_at: int, payload: Sequence[str]) -> str:
    return _join_parts(
        [
            _trim_blank_edges(lines[:insert_at], head=False),
            _trim_blank_edges(payload),
            _trim_blank_edges(lines[insert_at:], tail=False),
        ]
    )


def _drop_dangling_padding(lines: List[str], config: OutlineConfig) -> List[str]:
    """Drop a rule/blank padding left in front of the pinned section with nothing above it."""
    pinned = find_pinned(parse_sections(join_lines(lines), config))
    if pinned is None or pinned.start_line == 0:
        return lines
    boundary = pinned_boundary(lines, pinned)
    if all(is_blank(line) for line in lines[:boundary]):
        return lines[pinned.start_line :]
    return lines


def _valid_index(index: int, count: int) -> bool:
    return 0 <= index < count


# ── Sections ─────────────────────────────────────────────────


def _section_ranges(text: str, config: OutlineConfig) -> Tuple[List[str], List[Tuple[int, int]], int]:
    lines = _lines(text)
    sections = parse_sections(text, config)
    boundary = pinned_boundary(lines, find_pinned(sections))
    ranges = [(s.start_line, clamped_end(s, boundary)) for s in draggable_sections(sections)]
    return lines, ranges, boundary


def move_section(text: str, from_index: int, to_index: int, config: OutlineConfig = OUTLINE) -> str:
    """Move a draggable section so it ends up at ``to_index`` among draggable sections."""
    if from_index == to_index:
        return text

    lines, ranges, _ = _section_ranges(text, config)
    if not (_valid_index(from_index, len(ranges)) and _valid_index(to_index, len(ranges))):
        logger.warning(f"Ignoring section move {from_index} -> {to_index}: {len(ranges)} sections")
        return text

    start, end = ranges[from_index]
    payload = lines[start:end]
    remaining = _excise(lines, start, end)

    _, remaining_ranges, remaining_boundary = _section_ranges(join_lines(remaining), config)
    if to_index >= len(remaining_ranges):
        insert_at = remaining_boundary
    else:
        insert_at = remaining_ranges[to_index][0]

    logger.debug(f"Moving section lines [{start}, {end}) to line {insert_at} of remainder")
    return _splice_in(remaining, insert_at, payload)


def remove_section(text: str, index: int, config: OutlineConfig = OUTLINE) -> str:
    """Remove a draggable section, leaving one blank line at the edit point."""
    lines, ranges, _ = _section_ranges(text, config)
    if not _valid_index(index, len(ranges)):
        logger.warning(f"Ignoring section removal {index}: {len(ranges)} sections")
        return text

    start, end = ranges[index]
    remaining = _drop_dangling_padding(_excise(lines, start, end), config)
    logger.debug(f"Removed section lines [{start}, {end})")
    return _finish(remaining)


def extract_section(text: str, index: int, config: OutlineConfig = OUTLINE) -> Optional[Extraction]:
    """Copy a draggable section's body (heading excluded) for a new note.

    Returns None for an out-of-range index.

    Raises:
        EmptyExtraction: If the section has no body.
    """
    lines = _lines(text)
    sections = parse_sections(text, config)
    draggable = draggable_sections(sections)
    if not _valid_index(index, len(draggable)):
        logger.warning(f"Ignoring section extraction {index}: {len(draggable)} sections")
        return None

    section: Section = draggable[index]
    boundary = pinned_boundary(lines, find_pinned(sections))
    body = section_body_lines(lines, section, boundary)
    if not body:
        raise EmptyExtraction(f'Cannot extract an empty section: "{section.heading}"')
    return Extraction(heading=section.heading, body=join_lines(body), section_index=index)


# ── Blocks and groups ────────────────────────────────────────


def _block_ranges(text: str, config: OutlineConfig) -> Tuple[List[str], List[Tuple[int, int]], int]:
    parsed = OutlineBlockParser(config).parse(text)
    return _lines(text), [(b.start_line, b.end_line) for b in parsed.blocks], parsed.region_end


def _group_ranges(text: str, config: OutlineConfig) -> Tuple[List[str], List[Tuple[int, int]], int]:
    parsed = OutlineBlockParser(config).parse(text)
    grouped = group_blocks(parsed.blocks)
    starts = [parsed.blocks[g.header].start_line for g in grouped.groups]
    ends = starts[1:] + [parsed.region_end]
    return _lines(text), list(zip(starts, ends)), parsed.region_end


def move_block(text: str, from_index: int, to_index: int, config: OutlineConfig = OUTLINE) -> str:
    """Move one block so it ends up at ``to_index`` among blocks."""
    if from_index == to_index:
        return text

    lines, ranges, _ = _block_ranges(text, config)
    if not (_valid_index(from_index, len(ranges)) and _valid_index(to_index, len(ranges))):
        logger.warning(f"Ignoring block move {from_index} -> {to_index}: {len(ranges)} blocks")
        return text

    start, end = ranges[from_index]
    payload = lines[start:end]
    remaining = _excise(lines, start, end)

    _, remaining_ranges, region_end = _block_ranges(join_lines(remaining), config)
    insert_at = region_end if to_index >= len(remaining_ranges) else remaining_ranges[to_index][0]

    logger.debug(f"Moving block lines [{start}, {end}) to line {insert_at} of remainder")
    return _splice_in(remaining, insert_at, payload)


def remove_block(text: str, index: int, config: OutlineConfig = OUTLINE) -> str:
    lines, ranges, _ = _block_ranges(text, config)
    if not _valid_index(index, len(ranges)):
        logger.warning(f"Ignoring block removal {index}: {len(ranges)} blocks")
        return text

    start, end = ranges[index]
    remaining = _drop_dangling_padding(_excise(lines, start, end), config)
    logger.debug(f"Removed block lines [{start}, {end})")
    return _finish(remaining)


def move_group(text: str, from_index: int, to_index: int, config: OutlineConfig = OUTLINE) -> str:
    """Move a heading group (heading plus children) to ``to_index`` among groups."""
    if from_index == to_index:
        return text

    lines, ranges, _ = _group_ranges(text, config)
    if not (_valid_index(from_index, len(ranges)) and _valid_index(to_index, len(ranges))):
        logger.warning(f"Ignoring group move {from_index} -> {to_index}: {len(ranges)} groups")
        return text

    start, end = ranges[from_index]
    payload = lines[start:end]
    remaining = _excise(lines, start, end)

    _, remaining_ranges, region_end = _group_ranges(join_lines(remaining), config)
    insert_at = region_end if to_index >= len(remaining_ranges) else remaining_ranges[to_index][0]

    logger.debug(f"Moving group lines [{start}, {end}) to line {insert_at} of remainder")
    return _splice_in(remaining, insert_at, payload)


def move_group_before_block(
    text: str,
    group_index: int,
    block_index: int,
    config: OutlineConfig = OUTLINE,
) -> str:
    """Move a heading group so it lands in front of block ``block_index``.

    ``block_index`` counts blocks in the current document; ``len(blocks)``
    means the end of the block region. Targets inside the group itself, or
    directly after it, leave the document unchanged.
    """
    parsed = OutlineBlockParser(config).parse(text)
    grouped = group_blocks(parsed.blocks)
    if not _valid_index(group_index, len(grouped.groups)) or not 0 <= block_index <= len(parsed.blocks):
        logger.warning(f"Ignoring group drop {group_index} -> block {block_index}")
        return text

    group = grouped.groups[group_index]
    if group.first <= block_index <= group.last + 1:
        logger.debug(f"Group {group_index} dropped onto itself (block {block_index})")
        return text

    lines = _lines(text)
    start = parsed.blocks[group.first].start_line
    next_groups = grouped.groups[group_index + 1 :]
    end = parsed.blocks[next_groups[0].header].start_line if next_groups else parsed.region_end
    payload = lines[start:end]
    remaining = _excise(lines, start, end)

    size = group.last - group.first + 1
    target = block_index - size if block_index > group.last else block_index
    _, remaining_ranges, region_end = _block_ranges(join_lines(remaining), config)
    insert_at = region_end if target >= len(remaining_ranges) else remaining_ranges[target][0]

    logger.debug(f"Moving group lines [{start}, {end}) before block {target} of remainder")
    return _splice_in(remaining, insert_at, payload)


# ── Inserts ──────────────────────────────────────────────────


def _add_reference_lines(lines: List[str], pinned: Section, target: str) -> List[str]:
    """Append a back-reference entry to the pinned section unless it already has one."""
    body = lines[pinned.start_line : pinned.end_line]
    if wikilink(target) in join_lines(body):
        return lines

    last = pinned.start_line
    for idx in range(pinned.start_line, pinned.end_line):
        if not is_blank(lines[idx]):
            last = idx

    entry = [back_reference_line(target)]
    if last == pinned.start_line:
        entry = [""] + entry
    return lines[: last + 1] + entry + lines[last + 1 :]


def _new_pinned_section(target: str, config: OutlineConfig) -> List[List[str]]:
    return [[RULE], [heading_line(config.pinned_section_name)], [back_reference_line(target)]]


def insert_section(
    text: str,
    payload: Sequence[str],
    back_reference: Optional[str] = None,
    config: OutlineConfig = OUTLINE,
) -> str:
    """Insert ``payload`` lines in front of the pinned section (or at the end).

    With ``back_reference`` the pinned section gains a ``- [[name]]`` entry,
    and is created (after a horizontal rule) when the document has none.
    """
    lines = _lines(text)
    pinned = find_pinned(parse_sections(text, config))

    if pinned is not None:
        if back_reference:
            lines = _add_reference_lines(lines, pinned, back_reference)
        return _splice_in(lines, pinned_boundary(lines, pinned), payload)

    parts = [_trim_blank_edges(lines), _trim_blank_edges(payload)]
    if back_reference:
        parts.extend(_new_pinned_section(back_reference, config))
        logger.debug(f'Creating pinned section "{config.pinned_section_name}"')
    return _join_parts(parts)


def insert_blank_section(text: str, config: OutlineConfig = OUTLINE) -> str:
    return insert_section(text, [heading_line(config.new_section_heading)], config=config)


def insert_quoted_section(
    text: str,
    heading: str,
    body: str,
    source_name: str,
    config: OutlineConfig = OUTLINE,
) -> str:
    """Insert ``## heading`` over ``body`` as an attributed quote block."""
    payload = [heading_line(heading), ""] + quote_lines(body.strip(), source_name)
    return insert_section(text, payload, back_reference=source_name, config=config)


def add_back_reference(text: str, target: str, config: OutlineConfig = OUTLINE) -> str:
    """Record ``[[target]]`` in the pinned section, creating it if needed.

    Everything else in the document is left byte-for-byte as it was.
    """
    lines = _lines(text)
    pinned = find_pinned(parse_sections(text, config))
    if pinned is not None:
        return join_lines(_add_reference_lines(lines, pinned, target))

    parts = [_trim_blank_edges(lines)] + _new_pinned_section(target, config)
    return _join_parts(parts)
