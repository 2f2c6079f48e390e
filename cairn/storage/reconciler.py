"""
Buffer/Disk Reconciler
======================
Answers "what is the current text of this document" and "commit this new
text" against whichever copy is authoritative right now.

If the document is open in a live editing surface, that surface's buffer is
read and written (writing marks it dirty for the surface's own save cycle).
Otherwise reads and writes go to the document store. Nothing is cached:
every read re-fetches current truth.

Read-mutate-commit cycles run under a per-document lock (an in-process
re-entrant lock, plus a file lock when the document lives on disk), and a
commit can carry the digest of the text it was computed from so a stale
write is refused.
"""

from __future__ import annotations

import hashlib
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Protocol

from filelock import FileLock, Timeout
from loguru import logger

from cairn.config import TIMEOUTS
from cairn.errors import StaleDocument
from cairn.storage.store import DocumentStore


def text_digest(text: str) -> str:
    """SHA-256 of a document's text, used for optimistic commits."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class LiveBuffer:
    """In-memory content of a document open in an editing surface."""

    def __init__(self, doc_id: str, text: str):
        self.doc_id = doc_id
        self._text = text
        self.dirty = False

    def get_value(self) -> str:
        return self._text

    def set_value(self, text: str) -> None:
        self._text = text
        self.dirty = True

    def save(self, store: DocumentStore) -> None:
        """Flush the buffer to storage (the surface's own save cycle)."""
        store.write(self.doc_id, self._text)
        self.dirty = False


class BufferRegistry:
    """Lookup of documents currently open in live editing surfaces."""

    def __init__(self):
        self._buffers: Dict[str, LiveBuffer] = {}

    def open(self, doc_id: str, text: str) -> LiveBuffer:
        buffer = LiveBuffer(doc_id, text)
        self._buffers[doc_id] = buffer
        return buffer

    def close(self, doc_id: str) -> Optional[LiveBuffer]:
        return self._buffers.pop(doc_id, None)

    def get(self, doc_id: str) -> Optional[LiveBuffer]:
        return self._buffers.get(doc_id)

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._buffers


class TextSource(Protocol):
    """Where a document's current text is read from and committed to."""

    def read(self, doc_id: str) -> str:
        ...

    def write(self, doc_id: str, text: str) -> None:
        ...


class LiveBufferSource:
    def __init__(self, buffer: LiveBuffer):
        self.buffer = buffer

    def read(self, doc_id: str) -> str:
        return self.buffer.get_value()

    def write(self, doc_id: str, text: str) -> None:
        self.buffer.set_value(text)


class DiskSource:
    def __init__(self, store: DocumentStore):
        self.store = store

    def read(self, doc_id: str) -> str:
        return self.store.read(doc_id)

    def write(self, doc_id: str, text: str) -> None:
        self.store.write(doc_id, text)


class Reconciler:
    """Single seam between structural edits and the document's current copy.

    Usage:
        reconciler = Reconciler(store, buffers)
        changed = reconciler.apply("Essay.md", lambda text: move_section(text, 0, 1))
    """

    def __init__(
        self,
        store: DocumentStore,
        buffers: Optional[BufferRegistry] = None,
        lock_timeout_seconds: int = TIMEOUTS.FILE_LOCK,
    ):
        self.store = store
        self.buffers = buffers if buffers is not None else BufferRegistry()
        self.lock_timeout_seconds = lock_timeout_seconds
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}
        self._file_locks: Dict[str, FileLock] = {}

    def source_for(self, doc_id: str) -> TextSource:
        buffer = self.buffers.get(doc_id)
        if buffer is not None:
            return LiveBufferSource(buffer)
        return DiskSource(self.store)

    def get_current_text(self, doc_id: str) -> str:
        return self.source_for(doc_id).read(doc_id)

    def commit(self, doc_id: str, text: str, expected_digest: Optional[str] = None) -> None:
        """Replace the document's whole text.

        Args:
            doc_id: Document identifier (vault-relative path)
            text: New full text
            expected_digest: Digest of the text the edit was computed from;
                the commit is refused if the document has changed since

        Raises:
            StaleDocument: If ``expected_digest`` no longer matches.
        """
        source = self.source_for(doc_id)
        with self.locked(doc_id):
            if expected_digest is not None and text_digest(source.read(doc_id)) != expected_digest:
                logger.warning(f"Refusing stale commit to {doc_id}")
                raise StaleDocument(doc_id)
            source.write(doc_id, text)

    def _thread_lock(self, doc_id: str) -> threading.RLock:
        with self._guard:
            return self._locks.setdefault(doc_id, threading.RLock())

    def _file_lock(self, doc_id: str) -> Optional[FileLock]:
        lock_path_for = getattr(self.store, "lock_path", None)
        if lock_path_for is None or doc_id in self.buffers:
            return None
        with self._guard:
            if doc_id not in self._file_locks:
                self._file_locks[doc_id] = FileLock(lock_path_for(doc_id), timeout=self.lock_timeout_seconds)
            return self._file_locks[doc_id]

    @contextmanager
    def locked(self, doc_id: str) -> Iterator[None]:
        """Hold the per-document lock for a read-mutate-commit cycle."""
        with self._thread_lock(doc_id):
            file_lock = self._file_lock(doc_id)
            if file_lock is None:
                yield
                return
            try:
                file_lock.acquire()
            except Timeout as e:
                raise TimeoutError(
                    f"Timed out acquiring document lock {file_lock.lock_file} after {self.lock_timeout_seconds}s"
                ) from e
            try:
                yield
            finally:
                file_lock.release()

    def apply(self, doc_id: str, mutation: Callable[[str], str]) -> bool:
        """Read current text, compute new text, commit it; all under the document lock.

        Returns:
            True if the document changed, False for a no-op.
        """
        with self.locked(doc_id):
            current = self.get_current_text(doc_id)
            updated = mutation(current)
            if updated == current:
                return False
            self.source_for(doc_id).write(doc_id, updated)
        logger.info(f"Committed edit to {doc_id} ({len(current)} -> {len(updated)} chars)")
        return True
