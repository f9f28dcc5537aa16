from __future__ import annotations

import json

import pytest
from picksort.io.vocabulary import VocabularyError, load_vocabulary
from picksort.models.base import ImageTag


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_loads_flat_string_array(tmp_path):
    path = _write(tmp_path / "tags.json", ["like", "love", "lust", "like"])

    assert [tag.title for tag in load_vocabulary(path)] == ["like", "love", "lust"]


def test_loads_named_objects(tmp_path):
    path = _write(
        tmp_path / "tags.json",
        [{"name": "Felis catus", "nickname": "cat"}, {"name": "Canis familiaris"}],
    )

    assert load_vocabulary(path) == [
        ImageTag("Felis catus", "cat"),
        ImageTag("Canis familiaris"),
    ]


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "tags.json"
    path.write_text("[not json", encoding="utf-8")

    with pytest.raises(VocabularyError):
        load_vocabulary(path)


@pytest.mark.parametrize("payload", [{"tags": []}, [1, 2], [{"nickname": "x"}]])
def test_unsupported_shapes_raise(tmp_path, payload):
    with pytest.raises(VocabularyError):
        load_vocabulary(_write(tmp_path / "tags.json", payload))


def test_missing_file_raises(tmp_path):
    with pytest.raises(VocabularyError):
        load_vocabulary(tmp_path / "missing.json")
