"""
Error Conditions
================
Named conditions surfaced to callers before any document is written.

Validation problems that come from stale UI state (bad index, moving a unit
onto itself) are not errors; those operations are no-ops.
"""


class CairnError(ValueError):
    """Base class for user-visible precondition failures."""


class EmptyExtraction(CairnError):
    """Raised when a section (or selection) has no body to extract."""


class EmptyName(CairnError):
    """Raised when a note name is empty after sanitising."""


class DestinationExists(CairnError):
    """Raised when a note would overwrite an existing file."""

    def __init__(self, path: str):
        super().__init__(f'File "{path}" already exists')
        self.path = path


class StaleDocument(CairnError):
    """Raised when a commit's expected digest no longer matches the document."""

    def __init__(self, doc_id: str):
        super().__init__(f"Document changed since it was read: {doc_id}")
        self.doc_id = doc_id


class DocumentNotFound(FileNotFoundError):
    """Raised when a referenced document no longer exists."""

    def __init__(self, doc_id: str):
        super().__init__(f"Document not found: {doc_id}")
        self.doc_id = doc_id
