"""
Sample Essay
============
An onboarding essay built from the tool's own conventions: level-2
sections, an attributed quote block, and a pinned ``Sources`` section.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from cairn.config import OUTLINE, OutlineConfig
from cairn.projects import Project, ProjectRegistry
from cairn.storage.store import DocumentStore

SAMPLE_ESSAY_NAME = "Cairn - Getting Started"
SAMPLE_ESSAY_PATH = f"{SAMPLE_ESSAY_NAME}.md"


def sample_essay_text(config: OutlineConfig = OUTLINE) -> str:
    return f"""# {SAMPLE_ESSAY_NAME}

## What you're looking at

This is a sample essay. Each level-2 heading is a section you can move,
remove, or extract into a note of its own.

## Collecting sources

Queue notes as sources for the essay, then pull pieces of them in:

1. Quote a selection into a new section
2. Distill a highlight into an atomic note of your own
3. Add a short note as-is

## Pulling in content

Quoted text keeps a link to where it came from:

> Sources stay separate from the writing until you deliberately pull something in. [[Cairn Documentation|*]]

## What to do next

Move this section to the top, then export the essay to see the clean text.

## {config.pinned_section_name}

- [[Cairn Documentation]]
"""


def create_sample_essay(
    store: DocumentStore,
    registry: Optional[ProjectRegistry] = None,
    config: OutlineConfig = OUTLINE,
) -> Optional[Project]:
    """Write the sample essay and, with a registry, track it as the active project.

    Raises:
        DestinationExists: If the sample essay already exists.
    """
    store.create(SAMPLE_ESSAY_PATH, sample_essay_text(config))
    logger.info(f"Created sample essay {SAMPLE_ESSAY_PATH}")
    if registry is None:
        return None
    return registry.create_project(SAMPLE_ESSAY_NAME, SAMPLE_ESSAY_PATH)
