"""
Utility Functions
=================
Common utilities for path validation, note naming, and schema validation.
"""

from .validation import (
    is_safe_path,
    validate_vault_path,
    sanitize_note_name,
    note_path,
)

from .schema_validation import (
    validate_against_schema,
    validate_project_registry,
    is_valid_project_registry,
)

__all__ = [
    # Validation
    "is_safe_path",
    "validate_vault_path",
    "sanitize_note_name",
    "note_path",
    # Schema validation
    "validate_against_schema",
    "validate_project_registry",
    "is_valid_project_registry",
]
