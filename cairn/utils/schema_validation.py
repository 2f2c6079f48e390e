"""
Schema Validation Utilities
===========================
Validation of persisted Cairn state against the JSON Schemas shipped in
``cairn/schemas``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"
PROJECT_REGISTRY_SCHEMA = "project_registry.schema.json"


@lru_cache(maxsize=8)
def _validator(schema_filename: str) -> Draft202012Validator:
    """Build (once) a validator for a bundled schema file.

    Raises:
        FileNotFoundError: When the schema is not bundled.
        ValueError: When the name escapes the schemas folder or the file is
            not a JSON object.
    """
    schema_path = (SCHEMAS_DIR / schema_filename).resolve()
    if schema_path.parent != SCHEMAS_DIR:
        raise ValueError(f"Schema name must be a bare file name: {schema_filename}")
    if not schema_path.is_file():
        raise FileNotFoundError(f"Schema not found: {schema_filename}")

    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Unreadable schema {schema_filename}: {e}")
    if not isinstance(schema, dict):
        raise ValueError(f"Schema {schema_filename} must be a JSON object")

    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema, format_checker=FormatChecker())


def _describe(error: ValidationError) -> str:
    location = "/".join(str(p) for p in error.absolute_path)
    return f"at '{location}': {error.message}" if location else error.message


def validate_against_schema(payload: Any, schema_filename: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        ValueError: Listing every violation, shallowest first.
    """
    errors: List[ValidationError] = sorted(
        _validator(schema_filename).iter_errors(payload),
        key=lambda e: (len(e.absolute_path), list(map(str, e.absolute_path))),
    )
    if errors:
        raise ValueError("Validation failed: " + "; ".join(_describe(e) for e in errors))


def validate_project_registry(payload: Dict[str, Any]) -> None:
    """Schema-check a project registry, then check the active id names a project."""
    validate_against_schema(payload, PROJECT_REGISTRY_SCHEMA)

    active = payload.get("active_project_id")
    if active is not None and active not in {p["id"] for p in payload["projects"]}:
        raise ValueError(f"Validation failed at 'active_project_id': unknown project {active!r}")


def is_valid_project_registry(payload: Any) -> bool:
    try:
        validate_project_registry(payload)
    except ValueError:
        return False
    return True
