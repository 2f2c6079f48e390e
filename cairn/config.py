"""
Centralized Configuration
=========================
Centralized configuration values and constants for the Cairn essay assembler.

This module provides:
- Outline conventions (pinned section name, default headings, preview sizes)
- Timeout configuration for file locks
- Environment variable defaults

Parsers and mutators take an ``OutlineConfig`` argument explicitly; the
singletons below are only their default values.
"""

import os
from dataclasses import dataclass, replace


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class OutlineConfig:
    """Markup and editing conventions for essay documents."""

    # Heading text of the bibliography-like section kept last
    pinned_section_name: str = os.getenv("CAIRN_PINNED_SECTION", "Sources")

    # Heading used by "add blank section"
    new_section_heading: str = "New Section"

    # Block preview and quote heading lengths (characters)
    preview_length: int = 80
    quote_heading_length: int = 60

    # Export
    export_include_headings: bool = _env_flag("CAIRN_EXPORT_INCLUDE_HEADINGS", "true")

    # Distill
    add_backlink_to_source: bool = _env_flag("CAIRN_ADD_BACKLINK_TO_SOURCE", "false")
    distill_default_folder: str = os.getenv("CAIRN_DISTILL_FOLDER", "")

    # Related-note suggestions shown next to the outline
    max_related_notes: int = 6

    def with_overrides(self, **changes) -> "OutlineConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class TimeoutConfig:
    """Centralized timeout configuration in seconds."""

    # Per-document file lock acquisition
    FILE_LOCK: int = int(os.getenv("CAIRN_FILE_LOCK_TIMEOUT", "30"))


@dataclass(frozen=True)
class FilenameConfig:
    """Filename constraints."""

    # Maximum filename length (Linux ext4/macOS HFS+ limit)
    MAX_LENGTH: int = 255

    # Hidden folder inside the vault for lock files
    STATE_DIR: str = ".cairn"


# Global singleton instances
OUTLINE = OutlineConfig()
TIMEOUTS = TimeoutConfig()
FILENAMES = FilenameConfig()
