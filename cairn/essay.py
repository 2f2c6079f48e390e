"""
Essay Editor
============
Read-mutate-commit orchestration for one essay document.

Every operation:
1. takes the document lock through the reconciler
2. reads the freshest text (live buffer if open, else disk)
3. computes the new text with a pure mutator function
4. commits the whole text in one write

Operations return True when the essay changed and False for a no-op (stale
index, self-move). Precondition failures (``EmptyExtraction``,
``EmptyName``, ``DestinationExists``) are raised before anything is
written.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from cairn.config import OUTLINE, OutlineConfig
from cairn.errors import DestinationExists, EmptyExtraction, EmptyName
from cairn.notes.distill import HighlightReference, render_distilled_note
from cairn.notes.source_notes import (
    add_backlink_to_source,
    prepare_note_body,
    quote_heading,
    related_link_targets,
)
from cairn.outline import mutator
from cairn.outline.blocks import Block, OutlineBlockParser
from cairn.outline.export import OutlineStats, count_words, outline_stats, render_export
from cairn.outline.grouping import GroupedBlocks, group_blocks
from cairn.outline.sections import Section, parse_sections
from cairn.storage.reconciler import Reconciler
from cairn.utils.validation import note_path, sanitize_note_name


def note_name_from_path(path: str) -> str:
    """Basename of a vault-relative note path, without ``.md``."""
    return PurePosixPath(path).stem


@dataclass(frozen=True)
class EssayOutline:
    """Everything derived from one read of the essay."""

    sections: List[Section]
    blocks: List[Block]
    grouped: GroupedBlocks
    stats: OutlineStats


@dataclass(frozen=True)
class ExportResult:
    text: str
    word_count: int


class EssayEditor:
    """
    Structural editing of one essay through a reconciler.

    Usage:
        editor = EssayEditor(Reconciler(VaultStore(vault)), "Essays/Draft.md")
        editor.move_section(0, 2)
        editor.add_note("Some Note", raw_note_text)
        export = editor.export(include_headings=False)
    """

    def __init__(self, reconciler: Reconciler, doc_id: str, config: OutlineConfig = OUTLINE):
        self.reconciler = reconciler
        self.doc_id = doc_id
        self.config = config

    @property
    def store(self):
        return self.reconciler.store

    @property
    def name(self) -> str:
        return note_name_from_path(self.doc_id)

    def text(self) -> str:
        return self.reconciler.get_current_text(self.doc_id)

    def outline(self) -> EssayOutline:
        text = self.text()
        blocks = OutlineBlockParser(self.config).parse(text).blocks
        return EssayOutline(
            sections=parse_sections(text, self.config),
            blocks=blocks,
            grouped=group_blocks(blocks),
            stats=outline_stats(text, self.config),
        )

    def _apply(self, operation: str, mutation) -> bool:
        changed = self.reconciler.apply(self.doc_id, mutation)
        if changed:
            logger.info(f"{operation} applied to {self.doc_id}")
        else:
            logger.debug(f"{operation} left {self.doc_id} unchanged")
        return changed

    # ── Reordering and removal ──

    def move_section(self, from_index: int, to_index: int) -> bool:
        return self._apply(
            f"move section {from_index}->{to_index}",
            lambda text: mutator.move_section(text, from_index, to_index, self.config),
        )

    def remove_section(self, index: int) -> bool:
        return self._apply(
            f"remove section {index}",
            lambda text: mutator.remove_section(text, index, self.config),
        )

    def move_block(self, from_index: int, to_index: int) -> bool:
        return self._apply(
            f"move block {from_index}->{to_index}",
            lambda text: mutator.move_block(text, from_index, to_index, self.config),
        )

    def remove_block(self, index: int) -> bool:
        return self._apply(
            f"remove block {index}",
            lambda text: mutator.remove_block(text, index, self.config),
        )

    def move_group(self, from_index: int, to_index: int) -> bool:
        return self._apply(
            f"move group {from_index}->{to_index}",
            lambda text: mutator.move_group(text, from_index, to_index, self.config),
        )

    def move_group_before_block(self, group_index: int, block_index: int) -> bool:
        return self._apply(
            f"move group {group_index} before block {block_index}",
            lambda text: mutator.move_group_before_block(text, group_index, block_index, self.config),
        )

    # ── Inserts ──

    def add_blank_section(self) -> bool:
        return self._apply(
            "add blank section",
            lambda text: mutator.insert_blank_section(text, self.config),
        )

    def add_note(self, note_name: str, raw_text: str) -> bool:
        """Pull a whole source note in as an attributed quote section."""
        if not note_name.strip():
            raise EmptyName("Note name cannot be empty")
        body = prepare_note_body(note_name, raw_text)
        return self._apply(
            f'add note "{note_name}"',
            lambda text: mutator.insert_quoted_section(text, note_name, body, note_name, self.config),
        )

    def add_note_from_store(self, source_path: str) -> bool:
        """Pull a source note in by its vault path (read from storage)."""
        if source_path == self.doc_id:
            logger.warning(f"Refusing to add {self.doc_id} to itself")
            return False
        raw = self.reconciler.get_current_text(source_path)
        return self.add_note(note_name_from_path(source_path), raw)

    def add_quote(self, selection: str, source_name: str, heading_prefix: str = "") -> bool:
        """Quote a selection from a source note into a new section."""
        if not selection.strip():
            raise EmptyExtraction("Selection is empty")
        heading = quote_heading(selection, self.config, prefix=heading_prefix)
        return self._apply(
            f'quote from "{source_name}"',
            lambda text: mutator.insert_quoted_section(text, heading, selection, source_name, self.config),
        )

    # ── New notes from the essay ──

    def _reserve_note_path(self, raw_name: str, folder: str) -> tuple[str, str]:
        name = sanitize_note_name(raw_name)
        if not name:
            raise EmptyName("Note name cannot be empty")
        path = note_path(folder, name)
        if self.store.exists(path):
            raise DestinationExists(path)
        return name, path

    def extract_section(self, index: int, folder: str = "") -> Optional[str]:
        """Copy a section's body to a new note and reference it from the pinned section.

        The section itself stays in the essay.

        Returns:
            Vault path of the new note, or None for an out-of-range index.
        """
        with self.reconciler.locked(self.doc_id):
            text = self.text()
            extraction = mutator.extract_section(text, index, self.config)
            if extraction is None:
                return None

            name, path = self._reserve_note_path(extraction.heading, folder)
            self.store.create(path, extraction.body + "\n")
            self.reconciler.commit(self.doc_id, mutator.add_back_reference(text, name, self.config))

        logger.info(f'Extracted "{extraction.heading}" to {path}')
        return path

    def extract_selection(self, selection: str, note_name: str, folder: str = "") -> str:
        """Create a note from a selection and reference it from the pinned section."""
        if not selection.strip():
            raise EmptyExtraction("Selection is empty")

        with self.reconciler.locked(self.doc_id):
            name, path = self._reserve_note_path(note_name, folder)
            self.store.create(path, selection.strip() + "\n")
            self._apply(
                f'reference "{name}"',
                lambda text: mutator.add_back_reference(text, name, self.config),
            )
        return path

    # ── Export ──

    def export(self, include_headings: Optional[bool] = None) -> ExportResult:
        output = render_export(self.text(), include_headings, self.config)
        return ExportResult(text=output, word_count=count_words(output))

    def related_notes(self, exclude_paths: Iterable[str] = ()) -> List[str]:
        """Vault paths of notes linked from the essay that are not yet sources.

        Link targets resolve to the first note in the vault with that basename.
        """
        excluded = set(exclude_paths) | {self.doc_id}
        by_name = {}
        for path in self.store.list_notes():
            by_name.setdefault(note_name_from_path(path), path)

        suggestions: List[str] = []
        for target in related_link_targets(self.text(), config=self.config):
            path = by_name.get(target)
            if path is None or path in excluded:
                continue
            suggestions.append(path)
        return suggestions


def distill_highlight(
    reconciler: Reconciler,
    source_path: str,
    quote: str,
    idea: str,
    title: str,
    folder: Optional[str] = None,
    reference: Optional[HighlightReference] = None,
    essays: Sequence[EssayEditor] = (),
    add_backlink: Optional[bool] = None,
    config: OutlineConfig = OUTLINE,
) -> str:
    """Distill a highlight into a new atomic note.

    Optionally appends a back-link to the source note's ``## Notes`` section
    and pulls the new note into each essay in ``essays``.

    Returns:
        Vault path of the new note.
    """
    name = sanitize_note_name(title)
    if not name:
        raise EmptyName("Note title cannot be empty")
    if folder is None:
        folder = config.distill_default_folder
    path = note_path(folder, name)
    store = reconciler.store
    if store.exists(path):
        raise DestinationExists(path)

    note_text = render_distilled_note(idea, quote, note_name_from_path(source_path), reference)
    store.create(path, note_text)

    if add_backlink is None:
        add_backlink = config.add_backlink_to_source
    if add_backlink:
        reconciler.apply(source_path, lambda text: add_backlink_to_source(text, name))

    for essay in essays:
        essay.add_note(name, note_text)

    logger.info(f'Distilled highlight from {source_path} into {path}')
    return path
