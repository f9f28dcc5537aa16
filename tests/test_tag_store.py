"""Tests for the persisted image to tags mapping."""

from __future__ import annotations

from pathlib import Path

import pytest
from picksort.io.key_value import KeyValueStore
from picksort.models.base import TagAssignment, TagResult, normalize_location
from picksort.services.tag_store import TAGS_KEY, TagStore


@pytest.fixture()
def backend(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "state.yaml")


@pytest.fixture()
def image(tmp_path: Path) -> Path:
    return normalize_location(tmp_path / "a.jpg")


def test_untagged_image_has_empty_assignment(image):
    assert TagStore().tags_for(image) == TagAssignment()


def test_add_tag_persists_each_change(backend, image):
    store = TagStore(backend)

    assert store.add_tag(image, "cats") == TagResult.ADDED
    assert KeyValueStore(backend.path).get(TAGS_KEY) == {str(image): ["cats"]}

    store.add_tag(image, "sunset")
    assert KeyValueStore(backend.path).get(TAGS_KEY) == {str(image): ["cats", "sunset"]}


def test_add_tag_is_idempotent(image):
    store = TagStore()
    store.add_tag(image, "cats")

    assert store.add_tag(image, "cats") == TagResult.DUPLICATE
    assert store.tags_for(image).as_list() == ["cats"]


def test_blank_tags_are_rejected(image):
    store = TagStore()

    assert store.add_tag(image, "   ") == TagResult.INVALID
    assert len(store) == 0


def test_thirty_third_tag_is_rejected(image):
    store = TagStore()
    for index in range(32):
        store.add_tag(image, f"tag{index}")

    assert store.add_tag(image, "extra") == TagResult.LIMIT_EXCEEDED
    assert len(store.tags_for(image)) == 32


def test_configured_limit_is_enforced(image):
    store = TagStore(max_tags=2)
    store.add_tag(image, "a")
    store.add_tag(image, "b")

    assert store.add_tag(image, "c") == TagResult.LIMIT_EXCEEDED


def test_remove_last_tag(backend, image):
    store = TagStore(backend)
    store.add_tag(image, "cats")
    store.add_tag(image, "sunset")

    assert store.remove_last_tag(image) == TagResult.REMOVED
    assert store.tags_for(image).as_list() == ["cats"]
    assert store.remove_last_tag(image) == TagResult.REMOVED
    assert store.remove_last_tag(image) == TagResult.EMPTY
    assert store.all_assignments() == {}
    assert backend.get(TAGS_KEY) == {}


def test_returned_assignments_are_snapshots(image):
    store = TagStore()
    store.add_tag(image, "cats")

    store.tags_for(image).add("mutated")
    store.all_assignments()[image].add("mutated")

    assert store.tags_for(image).as_list() == ["cats"]


def test_save_load_round_trip(backend, tmp_path):
    first = normalize_location(tmp_path / "a.jpg")
    second = normalize_location(tmp_path / "sub" / "b.png")
    store = TagStore(backend)
    store.add_tag(first, "cats")
    store.add_tag(first, "sunset")
    store.add_tag(second, "beach")

    restored = TagStore(KeyValueStore(backend.path))
    restored.load()

    assert restored.all_assignments() == store.all_assignments()
    assert restored.tags_for(first).as_list() == ["cats", "sunset"]


def test_load_skips_unparseable_entries(backend, image):
    backend.set(
        TAGS_KEY,
        {
            str(image): ["cats", "cats", "", 7],
            "relative/path.jpg": ["lost"],
            "": ["lost"],
            "/elsewhere/b.jpg": "not-a-list",
        },
    )
    store = TagStore(backend)
    store.load()

    assert store.all_assignments() == {image: TagAssignment(["cats"])}


def test_load_with_wrong_shape_gives_empty_store(backend, image):
    backend.set(TAGS_KEY, ["not", "a", "mapping"])
    store = TagStore(backend)
    store.add_tag(image, "stale")

    store.load()

    assert len(store) == 0


def test_corrupt_state_file_gives_empty_store(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")
    store = TagStore(KeyValueStore(path))

    store.load()

    assert store.all_assignments() == {}


def test_save_failure_is_logged_not_raised(backend, image, monkeypatch, caplog):
    def explode(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(backend, "set", explode)
    store = TagStore(backend)

    assert store.add_tag(image, "cats") == TagResult.ADDED
    assert "disk full" in caplog.text


def test_unencodable_file_name_does_not_wipe_state(tmp_path, caplog):
    path = tmp_path / "state.json"
    backend = KeyValueStore(path)
    backend.set("destinationURLBookmark", "token-data")
    store = TagStore(backend)
    good = normalize_location(tmp_path / "ok.jpg")
    bad = normalize_location(tmp_path / "bad\udcff.jpg")

    assert store.add_tag(good, "cats") == TagResult.ADDED
    assert store.add_tag(bad, "dogs") == TagResult.ADDED
    assert store.add_tag(good, "sunset") == TagResult.ADDED

    reloaded = KeyValueStore(path)
    assert reloaded.get("destinationURLBookmark") == "token-data"
    assert reloaded.get(TAGS_KEY) == {str(good): ["cats", "sunset"]}
    assert store.tags_for(bad).as_list() == ["dogs"]
    assert "not valid UTF-8" in caplog.text
