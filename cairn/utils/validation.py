"""
Validation Utilities
====================
Vault-relative path checks and note-name sanitising.

Note names become both file basenames and wikilink targets, so characters
illegal in either are removed rather than escaped.
"""

import re
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from loguru import logger

from cairn.config import FILENAMES

# File-name and wikilink breakers, plus control characters
_UNSAFE_NAME_CHARS = re.compile(r'[/\\:*?"<>|\x00-\x1f]')

MARKDOWN_SUFFIX = ".md"


def is_safe_path(path: Union[str, Path], base_dir: Union[str, Path]) -> bool:
    """
    Check that a vault-relative path stays inside the vault.

    Absolute paths and any ``..`` component are refused outright; symlinks
    are resolved before the containment check.
    """
    rel = str(path)
    if not rel or Path(rel).is_absolute() or ".." in PurePosixPath(rel).parts:
        logger.warning(f"Refusing vault path outside the vault: {path!r}")
        return False

    try:
        vault = Path(base_dir).resolve()
        (vault / rel).resolve().relative_to(vault)
    except (OSError, ValueError) as e:
        logger.warning(f"Vault path {path!r} escapes {base_dir}: {e}")
        return False
    return True


def validate_vault_path(base_dir: Union[str, Path], path: Union[str, Path]) -> Path:
    """
    Absolute location of a vault-relative path.

    Raises:
        ValueError: If the path is empty or leaves the vault
    """
    if not path:
        raise ValueError("Vault path cannot be empty")
    if not is_safe_path(path, base_dir):
        raise ValueError(f"Vault path is outside the vault: {path}")
    return Path(base_dir) / str(path)


def sanitize_note_name(name: str, max_length: int = FILENAMES.MAX_LENGTH) -> str:
    """Strip characters a note name cannot carry; "" means the name is unusable."""
    cleaned = _UNSAFE_NAME_CHARS.sub("", name or "").strip()
    limit = max_length - len(MARKDOWN_SUFFIX)
    return cleaned[:limit].rstrip()


def note_path(folder: Optional[str], name: str) -> str:
    """Vault-relative path of a markdown note: ``<folder>/<name>.md``."""
    folder = (folder or "").strip().strip("/")
    filename = f"{name}{MARKDOWN_SUFFIX}"
    return f"{folder}/{filename}" if folder else filename
