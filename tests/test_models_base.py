"""Tests for tag sets, vocabulary entries and location keys."""

from __future__ import annotations

from pathlib import Path

import pytest
from picksort.models.base import (
    DistributionReport,
    ImageTag,
    TagAssignment,
    TagResult,
    location_key,
    normalize_location,
    parse_location,
)


def test_assignment_keeps_insertion_order_without_duplicates():
    assignment = TagAssignment(["sunset", "cats", "sunset"])

    assert assignment.as_list() == ["sunset", "cats"]
    assert assignment.add("cats") == TagResult.DUPLICATE
    assert assignment.add("beach") == TagResult.ADDED
    assert list(assignment) == ["sunset", "cats", "beach"]


def test_assignment_limit():
    assignment = TagAssignment()
    for index in range(32):
        assert assignment.add(f"tag-{index}") == TagResult.ADDED

    assert assignment.add("one-too-many") == TagResult.LIMIT_EXCEEDED
    assert len(assignment) == 32
    assert "one-too-many" not in assignment


def test_remove_last_then_re_add_moves_tag_to_end():
    assignment = TagAssignment(["a", "b", "c"])

    assert assignment.remove_last() == TagResult.REMOVED
    assert assignment.as_list() == ["a", "b"]
    assignment.add("c")
    assert assignment == TagAssignment(["a", "b", "c"])


def test_remove_last_on_empty():
    assert TagAssignment().remove_last() == TagResult.EMPTY


def test_tag_result_ok():
    assert TagResult.ADDED.ok and TagResult.REMOVED.ok
    assert not TagResult.DUPLICATE.ok
    assert not TagResult.LIMIT_EXCEEDED.ok


def test_image_tag_from_string_and_object():
    plain = ImageTag.from_payload(" cats ")
    named = ImageTag.from_payload({"name": "Felis catus", "nickname": "cat"})
    bare = ImageTag.from_payload({"name": "dog"})

    assert plain == ImageTag("cats")
    assert named.display_text == "Felis catus (cat)"
    assert bare.nickname is None
    assert bare.display_text == "dog"


@pytest.mark.parametrize("payload", [42, {"nickname": "x"}, {"name": ""}, {"name": "a", "nickname": 3}])
def test_image_tag_rejects_bad_entries(payload):
    with pytest.raises(ValueError):
        ImageTag.from_payload(payload)


def test_location_key_round_trip(tmp_path):
    image = normalize_location(tmp_path / "a.jpg")

    assert parse_location(location_key(image)) == image


def test_parse_location_accepts_file_urls(tmp_path):
    image = normalize_location(tmp_path / "a.jpg")

    assert parse_location(f"file://{image}") == image


@pytest.mark.parametrize("key", ["", "relative/a.jpg", None, 12, "/bad\x00name.jpg"])
def test_parse_location_rejects_unusable_keys(key):
    assert parse_location(key) is None


def test_distribution_report_records_failures():
    report = DistributionReport()
    report.record_failure(Path("/x/a.jpg"), "cats", "disk full")

    assert report.failed == 1
    assert report.as_dict()["failures"] == [{"image": "/x/a.jpg", "tag": "cats", "error": "disk full"}]
