"""
Shared fixtures for the Cairn test suite.
"""

import pytest

from cairn.storage import BufferRegistry, Reconciler, VaultStore


ESSAY = """# Draft

Intro line.

## Alpha

Alpha body.

## Beta

> Quoted text [[Src|*]]

## Gamma

Gamma body.

---

## Sources

- [[Src]]
"""

SIMPLE_ESSAY = """## A
alpha

## B
beta

## Sources

- [[x]]
"""

ESSAY_PATH = "Essays/Draft.md"


@pytest.fixture
def essay_text():
    return ESSAY


@pytest.fixture
def simple_essay_text():
    return SIMPLE_ESSAY


@pytest.fixture
def temp_vault(tmp_path):
    """A vault folder holding the draft essay and one source note."""
    vault = tmp_path / "vault"
    (vault / "Essays").mkdir(parents=True)
    (vault / "Notes").mkdir()
    (vault / ESSAY_PATH).write_text(ESSAY, encoding="utf-8")
    (vault / "Notes" / "Idea.md").write_text(
        "---\ntags: thinking\n---\n# Idea\n\nIdeas compound over time.\n",
        encoding="utf-8",
    )
    return vault


@pytest.fixture
def store(temp_vault):
    return VaultStore(temp_vault)


@pytest.fixture
def buffers():
    return BufferRegistry()


@pytest.fixture
def reconciler(store, buffers):
    return Reconciler(store, buffers)
