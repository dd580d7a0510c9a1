"""
Tests for the annotation side-table.
"""

import json

import pytest

from mss_widget.core.annotations import AnnotationStore
from mss_widget.core.errors import AnnotationError, LogWriteError
from mss_widget.core.schema import Annotation


@pytest.fixture
def store(tmp_path):
    return AnnotationStore(tmp_path / "annotations.json")


def test_missing_file_is_empty(store):
    assert store.load() == {}
    assert store.get("0") == Annotation()


def test_upsert_persists_shape(store, tmp_path):
    annotation = store.upsert("4", note="clear answer", teacher="Mr. B")

    stored = json.loads((tmp_path / "annotations.json").read_text())
    assert set(stored) == {"4"}
    assert stored["4"]["note"] == "clear answer"
    assert stored["4"]["teacher"] == "Mr. B"
    assert stored["4"]["updatedAt"] == annotation.updatedAt
    assert annotation.updatedAt


def test_upsert_replaces_existing(store):
    store.upsert("1", note="first", teacher="A")
    store.upsert("1", note="second", teacher="")

    assert store.get(1).note == "second"
    assert store.get(1).teacher == ""


def test_other_ids_kept(store):
    store.upsert("1", note="one")
    store.upsert("2", note="two")

    assert {k: v.note for k, v in store.load().items()} == {"1": "one", "2": "two"}


def test_id_is_stripped(store):
    store.upsert("  7 ", note="x")
    assert "7" in store.load()


def test_blank_id_rejected(store, tmp_path):
    with pytest.raises(AnnotationError):
        store.upsert(" ", note="x")
    assert not (tmp_path / "annotations.json").exists()


def test_corrupt_store_reads_empty(store, tmp_path):
    (tmp_path / "annotations.json").write_text("[1, 2]")
    assert store.load() == {}

    store.upsert("0", note="recovered")
    assert store.get("0").note == "recovered"


def test_write_failure_surfaces(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = AnnotationStore(blocker / "annotations.json")

    with pytest.raises(LogWriteError):
        store.upsert("0", note="x")


def test_padded_id_uses_plain_index(store):
    store.upsert("07", note="padded")

    assert set(store.load()) == {"7"}
    assert store.get(7).note == "padded"
    assert store.get("007").note == "padded"
