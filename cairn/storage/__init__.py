"""
Storage
=======
Document storage and the buffer/disk reconciler.
"""

from .store import (
    DocumentStore,
    VaultStore,
)

from .reconciler import (
    BufferRegistry,
    DiskSource,
    LiveBuffer,
    LiveBufferSource,
    Reconciler,
    TextSource,
    text_digest,
)

__all__ = [
    "DocumentStore",
    "VaultStore",
    "BufferRegistry",
    "DiskSource",
    "LiveBuffer",
    "LiveBufferSource",
    "Reconciler",
    "TextSource",
    "text_digest",
]
