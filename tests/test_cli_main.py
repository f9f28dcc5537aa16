"""Tests for the CLI entry point."""

from __future__ import annotations

import json
import sys
import types
from pathlib import Path

import pytest

from picksort.__main__ import main as cli_main


@pytest.fixture()
def settings(tmp_path: Path) -> list[str]:
    return ["--settings", str(tmp_path / "settings.yaml"), "--state", str(tmp_path / "state.yaml")]


@pytest.fixture()
def source(tmp_path: Path) -> Path:
    folder = tmp_path / "source"
    folder.mkdir()
    for name in ("b.png", "a.jpg", "note.txt"):
        (folder / name).write_bytes(b"x")
    return folder


def test_cli_scan(settings, source, capsys):
    cli_main([*settings, "--scan", str(source)])

    payload = json.loads(capsys.readouterr().out)
    assert [Path(item).name for item in payload] == ["a.jpg", "b.png"]


def test_cli_tag_show_and_distribute(settings, source, tmp_path, capsys):
    image = source / "a.jpg"
    cli_main([*settings, "--image", str(image), "--add-tag", "cats", "--add-tag", "sunset", "--add-tag", "cats"])
    tagged = json.loads(capsys.readouterr().out)
    assert tagged["tags"] == ["cats", "sunset"]
    assert [item["result"] for item in tagged["results"]] == ["added", "added", "duplicate"]

    cli_main([*settings, "--show-tags"])
    shown = json.loads(capsys.readouterr().out)
    assert list(shown.values()) == [["cats", "sunset"]]

    dest = tmp_path / "dest"
    cli_main([*settings, "--distribute", str(dest)])
    report = json.loads(capsys.readouterr().out)
    assert (report["copied"], report["failed"]) == (2, 0)
    assert (dest / "sunset" / "a.jpg").exists()


def test_cli_remove_last_tag(settings, source, capsys):
    image = source / "a.jpg"
    cli_main([*settings, "--image", str(image), "--add-tag", "cats", "--remove-last-tag"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["tags"] == []
    assert payload["results"][-1]["result"] == "removed"


def test_cli_add_tag_requires_image(settings):
    with pytest.raises(SystemExit):
        cli_main([*settings, "--add-tag", "cats"])


def test_cli_vocabulary(settings, tmp_path, capsys):
    path = tmp_path / "tags.json"
    path.write_text(json.dumps([{"name": "cat", "nickname": "kitty"}, "dog"]), encoding="utf-8")

    cli_main([*settings, "--vocabulary", str(path)])

    assert json.loads(capsys.readouterr().out) == [
        {"name": "cat", "nickname": "kitty"},
        {"name": "dog", "nickname": None},
    ]


def test_cli_vocabulary_error_exits(settings, tmp_path):
    path = tmp_path / "tags.json"
    path.write_text("nope", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_main([*settings, "--vocabulary", str(path)])
    assert excinfo.value.code == 1


def test_cli_without_arguments_launches_gui(monkeypatch, tmp_path):
    calls = {}

    def fake_run_app(**kwargs):
        calls.update(kwargs)

    fake_gui = types.ModuleType("picksort.gui")
    fake_gui.run_app = fake_run_app
    monkeypatch.setitem(sys.modules, "picksort.gui", fake_gui)

    cli_main(["--state", str(tmp_path / "state.yaml")])

    assert calls == {"settings_path": None, "state_path": tmp_path / "state.yaml"}
