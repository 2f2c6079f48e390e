"""
Tests for the buffer/disk reconciler
====================================
"""

import threading

import pytest
from filelock import FileLock

from cairn.errors import DocumentNotFound, StaleDocument
from cairn.outline.mutator import move_section
from cairn.storage import Reconciler, text_digest

DOC = "Essays/Draft.md"


@pytest.mark.unit
def test_reads_disk_when_no_buffer_is_open(reconciler, essay_text):
    assert reconciler.get_current_text(DOC) == essay_text


@pytest.mark.unit
def test_live_buffer_wins_over_disk(reconciler, buffers):
    buffers.open(DOC, "## Unsaved\n")
    assert reconciler.get_current_text(DOC) == "## Unsaved\n"


@pytest.mark.unit
def test_apply_writes_disk_when_closed(reconciler, temp_vault, essay_text):
    changed = reconciler.apply(DOC, lambda text: move_section(text, 0, 1))

    assert changed is True
    on_disk = (temp_vault / DOC).read_text(encoding="utf-8")
    assert on_disk == move_section(essay_text, 0, 1)


@pytest.mark.unit
def test_apply_writes_buffer_when_open(reconciler, buffers, temp_vault, essay_text):
    buffer = buffers.open(DOC, essay_text)

    assert reconciler.apply(DOC, lambda text: move_section(text, 0, 1))

    assert buffer.dirty is True
    assert buffer.get_value() == move_section(essay_text, 0, 1)
    assert (temp_vault / DOC).read_text(encoding="utf-8") == essay_text

    buffer.save(reconciler.store)
    assert buffer.dirty is False
    assert (temp_vault / DOC).read_text(encoding="utf-8") == buffer.get_value()


@pytest.mark.unit
def test_closed_buffer_falls_back_to_disk(reconciler, buffers, essay_text):
    buffers.open(DOC, "## Unsaved\n")
    buffers.close(DOC)
    assert DOC not in buffers
    assert reconciler.get_current_text(DOC) == essay_text


@pytest.mark.unit
def test_noop_mutation_does_not_write(reconciler, buffers, essay_text):
    buffer = buffers.open(DOC, essay_text)
    assert reconciler.apply(DOC, lambda text: text) is False
    assert buffer.dirty is False


@pytest.mark.unit
def test_apply_to_missing_document_raises(reconciler):
    with pytest.raises(DocumentNotFound):
        reconciler.apply("Essays/Missing.md", lambda text: text + "x")


@pytest.mark.unit
def test_commit_with_matching_digest(reconciler, temp_vault, essay_text):
    reconciler.commit(DOC, "## New\n", expected_digest=text_digest(essay_text))
    assert (temp_vault / DOC).read_text(encoding="utf-8") == "## New\n"


@pytest.mark.unit
def test_commit_with_stale_digest_is_refused(reconciler, temp_vault, essay_text):
    stale = text_digest("an older version")

    with pytest.raises(StaleDocument):
        reconciler.commit(DOC, "## New\n", expected_digest=stale)

    assert (temp_vault / DOC).read_text(encoding="utf-8") == essay_text


@pytest.mark.unit
def test_locked_is_reentrant(reconciler):
    with reconciler.locked(DOC):
        with reconciler.locked(DOC):
            assert reconciler.apply(DOC, lambda text: text + "tail\n")


@pytest.mark.unit
def test_lock_timeout_raises_timeout_error(store):
    reconciler = Reconciler(store, lock_timeout_seconds=0)
    other = FileLock(store.lock_path(DOC), timeout=0)

    with other:
        with pytest.raises(TimeoutError):
            with reconciler.locked(DOC):
                pass


@pytest.mark.unit
def test_concurrent_applies_do_not_lose_edits(reconciler, temp_vault):
    def append(n):
        reconciler.apply(DOC, lambda text: text + f"line {n}\n")

    threads = [threading.Thread(target=append, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    text = (temp_vault / DOC).read_text(encoding="utf-8")
    assert all(f"line {n}\n" in text for n in range(8))
