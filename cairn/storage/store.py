"""
Document Store
==============
Durable storage for essay and source notes.

``DocumentStore`` is the storage interface the editor depends on;
``VaultStore`` keeps notes as UTF-8 markdown files under a vault folder,
addressed by vault-relative paths (``folder/Note.md``).

Design goals:
- Never overwrite on create (check-then-act happens before any write)
- Writes to a missing document fail instead of silently recreating it
- Per-document lock files live under ``<vault>/.cairn/locks``
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Protocol

from loguru import logger

from cairn.config import FILENAMES
from cairn.errors import DestinationExists, DocumentNotFound
from cairn.utils.validation import validate_vault_path


class DocumentStore(Protocol):
    """Storage interface used by the reconciler and the essay editor."""

    def read(self, doc_id: str) -> str:
        ...

    def write(self, doc_id: str, text: str) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...

    def create(self, path: str, text: str) -> None:
        ...


class VaultStore:
    """Markdown files under a vault root folder."""

    def __init__(self, root: str | Path, state_subdir: str = FILENAMES.STATE_DIR):
        self.root = Path(root)
        if not self.root.is_dir():
            raise ValueError(f"Vault root is not a directory: {self.root}")
        self.state_subdir = state_subdir

    def resolve(self, path: str) -> Path:
        return validate_vault_path(self.root, path)

    def read(self, doc_id: str) -> str:
        path = self.resolve(doc_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise DocumentNotFound(doc_id) from e

    def write(self, doc_id: str, text: str) -> None:
        path = self.resolve(doc_id)
        if not path.is_file():
            raise DocumentNotFound(doc_id)
        path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote {len(text)} chars to {doc_id}")

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def create(self, path: str, text: str) -> None:
        """Create a new note; never overwrites.

        Raises:
            DestinationExists: If anything already exists at ``path``.
        """
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(target, "x", encoding="utf-8") as f:
                f.write(text)
        except FileExistsError as e:
            raise DestinationExists(path) from e
        logger.info(f"Created note {path}")

    def list_notes(self, folder: str = "") -> List[str]:
        """Vault-relative paths of markdown notes under ``folder``, sorted."""
        base = self.resolve(folder) if folder else self.root
        if not base.is_dir():
            return []
        out: List[str] = []
        for p in base.rglob("*.md"):
            rel = p.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts[:-1]):
                continue
            out.append(rel.as_posix())
        return sorted(out)

    def lock_path(self, doc_id: str) -> Path:
        """Lock file guarding read-mutate-commit cycles on ``doc_id``."""
        digest = hashlib.sha1(doc_id.encode("utf-8")).hexdigest()
        lock_dir = self.root / self.state_subdir / "locks"
        lock_dir.mkdir(parents=True, exist_ok=True)
        return lock_dir / f"{digest}.lock"
