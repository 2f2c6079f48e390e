"""
Cairn
=====
Structural editing for markdown essays assembled from source notes.

An essay is a markdown document split into level-2 heading sections, with a
pinned bibliography section (``## Sources`` by default) kept last. Cairn
reorders, removes, and extracts sections and blocks, pulls source notes in
as attributed quotes, and exports the essay as clean text.
"""

from .config import OUTLINE, OutlineConfig
from .errors import (
    CairnError,
    DestinationExists,
    DocumentNotFound,
    EmptyExtraction,
    EmptyName,
    StaleDocument,
)
from .essay import EssayEditor, EssayOutline, ExportResult, distill_highlight
from .projects import Project, ProjectRegistry, ProjectSource
from .sample import create_sample_essay, sample_essay_text
from .storage import BufferRegistry, Reconciler, VaultStore

__all__ = [
    # Config
    "OUTLINE",
    "OutlineConfig",
    # Errors
    "CairnError",
    "DestinationExists",
    "DocumentNotFound",
    "EmptyExtraction",
    "EmptyName",
    "StaleDocument",
    # Editing
    "EssayEditor",
    "EssayOutline",
    "ExportResult",
    "distill_highlight",
    # Projects
    "Project",
    "ProjectRegistry",
    "ProjectSource",
    "create_sample_essay",
    "sample_essay_text",
    # Storage
    "BufferRegistry",
    "Reconciler",
    "VaultStore",
]
