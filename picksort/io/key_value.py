"""Flat key-value store persisted as a single YAML or JSON document."""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_MISSING = object()


class KeyValueStore:
    """Small preferences-style store; every write rewrites the whole file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._format = "json" if path.suffix.lower() == ".json" else "yaml"
        self._data: dict[str, Any] | None = None

    def get(self, key: str, default: Any = None) -> Any:
        data = self._ensure_loaded()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and persist.

        If persisting fails the previous value is put back and the error is
        re-raised; the file on disk is left as it was.
        """
        data = self._ensure_loaded()
        previous = data.get(key, _MISSING)
        data[key] = copy.deepcopy(value)
        try:
            self._flush()
        except Exception:
            self._restore(key, previous)
            raise

    def remove(self, key: str) -> None:
        data = self._ensure_loaded()
        previous = data.pop(key, _MISSING)
        if previous is _MISSING:
            return
        try:
            self._flush()
        except Exception:
            self._restore(key, previous)
            raise

    def _restore(self, key: str, previous: Any) -> None:
        data = self._ensure_loaded()
        if previous is _MISSING:
            data.pop(key, None)
        else:
            data[key] = previous

    def reload(self) -> None:
        self._data = None

    def __contains__(self, key: object) -> bool:
        return key in self._ensure_loaded()

    def _ensure_loaded(self) -> dict[str, Any]:
        if self._data is None:
            self._data = self._read()
        return self._data

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
            if self._format == "json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: expected a mapping at the top level.", self.path)
            return {}
        return data

    def _flush(self) -> None:
        data = self._ensure_loaded()
        if self._format == "json":
            payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        else:
            payload = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        encoded = payload.encode("utf-8")

        # Write beside the target, then swap it in; a failed write leaves the old file.
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_bytes(encoded)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
