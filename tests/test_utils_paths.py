"""Tests for filesystem helper utilities."""

from __future__ import annotations

from picksort.utils.paths import allowed_extensions, is_image_file, list_image_files


def _touch(*paths):
    for path in paths:
        path.write_text("placeholder", encoding="utf-8")


def test_is_image_file_is_case_insensitive(tmp_path):
    assert is_image_file(tmp_path / "A.JPG")
    assert is_image_file(tmp_path / "b.Heic")
    assert not is_image_file(tmp_path / "notes.txt")
    assert is_image_file(tmp_path / "x.custom", extensions=[".CUSTOM"])


def test_raw_extensions_are_opt_in():
    assert ".nef" not in allowed_extensions()
    assert {".raf", ".nef"} <= allowed_extensions(include_raw=True)


def test_list_image_files_sorted_and_filtered(tmp_path):
    _touch(tmp_path / "b.png", tmp_path / "a.jpg", tmp_path / "note.txt", tmp_path / ".hidden.jpg")
    nested = tmp_path / "nested"
    nested.mkdir()
    _touch(nested / "c.jpg")

    found = list_image_files(tmp_path)

    assert [path.name for path in found] == ["a.jpg", "b.png"]


def test_list_image_files_includes_hidden_on_request(tmp_path):
    _touch(tmp_path / ".hidden.jpg", tmp_path / "visible.gif")

    found = list_image_files(tmp_path, include_hidden=True)

    assert [path.name for path in found] == [".hidden.jpg", "visible.gif"]


def test_directories_with_image_suffix_are_ignored(tmp_path):
    (tmp_path / "album.jpg").mkdir()

    assert list_image_files(tmp_path) == []


def test_missing_folder_yields_empty_list(tmp_path):
    assert list_image_files(tmp_path / "missing") == []
