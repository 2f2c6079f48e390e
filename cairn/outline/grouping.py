"""Block grouping: heading blocks with the blocks that follow them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cairn.outline.blocks import Block


@dataclass(frozen=True)
class Group:
    """A heading block index plus the indices of its child blocks."""

    header: int
    children: List[int] = field(default_factory=list)

    @property
    def first(self) -> int:
        return self.header

    @property
    def last(self) -> int:
        return self.children[-1] if self.children else self.header

    def __contains__(self, block_index: int) -> bool:
        return self.first <= block_index <= self.last


@dataclass(frozen=True)
class GroupedBlocks:
    """Blocks before the first heading (orphans) and the heading groups."""

    orphans: List[int]
    groups: List[Group]


def group_blocks(blocks: List[Block]) -> GroupedBlocks:
    orphans: List[int] = []
    groups: List[Group] = []

    for idx, block in enumerate(blocks):
        if block.kind == "heading":
            groups.append(Group(header=idx))
        elif groups:
            groups[-1].children.append(idx)
        else:
            orphans.append(idx)

    return GroupedBlocks(orphans=orphans, groups=groups)
