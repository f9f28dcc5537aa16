"""Tests for the settings store helpers."""

from __future__ import annotations

from types import SimpleNamespace

from picksort.config import AppConfig
from picksort.settings_store import SettingsStore, default_settings_path


def _fake_os(name: str, **env: str) -> SimpleNamespace:
    def getenv(key: str, default=None):
        return env.get(key, default)

    return SimpleNamespace(name=name, getenv=getenv)


def test_default_settings_path_respects_xdg(monkeypatch, tmp_path):
    config_root = tmp_path / "xdg"
    monkeypatch.setattr("picksort.settings_store.os", _fake_os("posix", XDG_CONFIG_HOME=str(config_root)))

    assert default_settings_path() == config_root / "picksort" / "settings.yaml"


def test_default_settings_path_windows(monkeypatch, tmp_path):
    appdata = tmp_path / "AppData" / "Roaming"
    monkeypatch.setattr("picksort.settings_store.os", _fake_os("nt", APPDATA=str(appdata)))

    assert default_settings_path() == appdata / "picksort" / "settings.yaml"


def test_settings_store_round_trip(tmp_path):
    target_path = tmp_path / "settings.yaml"
    store = SettingsStore(path=target_path)

    store.save(AppConfig(include_hidden=True, recent_folder_limit=5))
    loaded = store.load()

    assert loaded.include_hidden is True
    assert loaded.recent_folder_limit == 5
    assert target_path.exists()


def test_settings_store_loads_defaults_when_missing(tmp_path):
    store = SettingsStore(path=tmp_path / "missing.yaml")

    assert store.load() == AppConfig()


def test_state_path_defaults_next_to_settings(tmp_path):
    store = SettingsStore(path=tmp_path / "settings.yaml")

    assert store.state_path(AppConfig()) == tmp_path / "state.yaml"
    override = tmp_path / "elsewhere.json"
    assert store.state_path(AppConfig(state_path=override)) == override
