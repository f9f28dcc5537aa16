"""Remembered folder grants so chosen folders survive a restart.

A :class:`PermissionToken` is an opaque blob minted for a folder. Resolving
it later yields the folder again, flagged ``stale`` when the token should be
re-minted (the folder at that path was replaced). Access to a folder is
scoped: every successful :meth:`AccessProvider.begin_access` is paired with
:meth:`AccessProvider.end_access`, which :func:`with_access` guarantees.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

import yaml

from ..io.key_value import KeyValueStore

logger = logging.getLogger(__name__)

RECENT_FOLDERS_KEY = "directoryBookmarkList"


class AccessError(PermissionError):
    """Raised when a folder grant cannot be created or resolved."""


class FolderRole(str, Enum):
    """Single-folder slots remembered between sessions."""

    SOURCE = "sourceURLBookmark"
    DESTINATION = "destinationURLBookmark"


@dataclass(frozen=True, slots=True)
class PermissionToken:
    data: str


@dataclass(frozen=True, slots=True)
class ResolvedFolder:
    folder: Path
    stale: bool = False


class AccessProvider(Protocol):
    """Operating-system side of folder grants."""

    def mint(self, folder: Path) -> PermissionToken:
        """Create a token for ``folder`` or raise :class:`AccessError`."""

    def resolve(self, token: PermissionToken) -> ResolvedFolder:
        """Turn a token back into a folder or raise :class:`AccessError`."""

    def begin_access(self, folder: Path) -> bool:
        """Start using ``folder``; ``False`` means access was refused."""

    def end_access(self, folder: Path) -> None:
        """Release a grant obtained through :meth:`begin_access`."""


class LocalAccessProvider:
    """Grants backed by plain filesystem permissions.

    Tokens record the folder path together with its device and inode so a
    folder replaced at the same path resolves as stale.
    """

    def __init__(self) -> None:
        self._active: dict[Path, int] = {}

    def mint(self, folder: Path) -> PermissionToken:
        folder = folder.expanduser().resolve()
        try:
            info = folder.stat()
        except OSError as exc:
            raise AccessError(f"Cannot create a grant for {folder}: {exc}") from exc
        if not folder.is_dir():
            raise AccessError(f"{folder} is not a folder.")
        payload = {"path": str(folder), "device": info.st_dev, "inode": info.st_ino}
        raw = json.dumps(payload, sort_keys=True).encode("utf-8")
        return PermissionToken(base64.urlsafe_b64encode(raw).decode("ascii"))

    def resolve(self, token: PermissionToken) -> ResolvedFolder:
        try:
            raw = base64.urlsafe_b64decode(token.data.encode("ascii"))
            payload = json.loads(raw.decode("utf-8"))
            folder = Path(payload["path"])
            identity = (int(payload["device"]), int(payload["inode"]))
        except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as exc:
            raise AccessError(f"Unreadable folder grant: {exc}") from exc

        try:
            info = folder.stat()
        except OSError as exc:
            raise AccessError(f"Folder {folder} is no longer available: {exc}") from exc
        if not folder.is_dir():
            raise AccessError(f"{folder} is no longer a folder.")
        return ResolvedFolder(folder=folder, stale=(info.st_dev, info.st_ino) != identity)

    def begin_access(self, folder: Path) -> bool:
        if not os.access(folder, os.R_OK):
            return False
        self._active[folder] = self._active.get(folder, 0) + 1
        return True

    def end_access(self, folder: Path) -> None:
        count = self._active.get(folder, 0)
        if count <= 1:
            self._active.pop(folder, None)
        else:
            self._active[folder] = count - 1

    def active_count(self, folder: Path) -> int:
        return self._active.get(folder, 0)


@contextmanager
def with_access(provider: AccessProvider, folder: Path) -> Iterator[bool]:
    """Hold access to ``folder`` for the duration of the block."""
    granted = provider.begin_access(folder)
    try:
        yield granted
    finally:
        if granted:
            provider.end_access(folder)


class DirectoryPermissionCache:
    """Persists folder grants in a :class:`KeyValueStore`."""

    def __init__(
        self,
        backend: KeyValueStore,
        provider: AccessProvider | None = None,
        *,
        recent_limit: int = 20,
    ) -> None:
        self.backend = backend
        self.provider = provider or LocalAccessProvider()
        self.recent_limit = recent_limit

    # --- Source / destination slots ---------------------------------------

    def remember(self, role: FolderRole, folder: Path) -> bool:
        try:
            token = self.provider.mint(folder)
        except AccessError as exc:
            logger.warning("Error saving folder grant for %s: %s", role.name.lower(), exc)
            return False
        return self._write(role.value, token.data)

    def restore(self, role: FolderRole) -> Path | None:
        data = self.backend.get(role.value)
        if not isinstance(data, str):
            return None
        folder = self._resolve(PermissionToken(data))
        if folder is None:
            return None
        if folder.stale:
            logger.info("Grant for %s is stale; re-saving.", role.name.lower())
            self.remember(role, folder.folder)
        return folder.folder

    def forget(self, role: FolderRole) -> None:
        try:
            self.backend.remove(role.value)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
            logger.warning("Failed to forget %s folder in %s: %s", role.name.lower(), self.backend.path, exc)

    # --- Sidebar of recent folders ---------------------------------------

    def add_recent(self, folder: Path) -> bool:
        folder = folder.expanduser().resolve()
        if folder in self.restore_recent():
            return False
        try:
            token = self.provider.mint(folder)
        except AccessError as exc:
            logger.warning("Error saving folder grant: %s", exc)
            return False
        stored = self._recent_tokens()
        stored.append(token.data)
        return self._write(RECENT_FOLDERS_KEY, stored[-self.recent_limit :])

    def remove_recent(self, folder: Path) -> bool:
        folder = folder.expanduser().resolve()
        kept: list[str] = []
        removed = False
        for data in self._recent_tokens():
            resolved = self._resolve(PermissionToken(data), quiet=True)
            if resolved is not None and resolved.folder == folder:
                removed = True
                continue
            kept.append(data)
        if not removed:
            return False
        return self._write(RECENT_FOLDERS_KEY, kept)

    def restore_recent(self) -> list[Path]:
        """Resolve every remembered folder, re-minting stale grants."""
        folders: list[Path] = []
        refreshed: list[str] = []
        changed = False
        for data in self._recent_tokens():
            resolved = self._resolve(PermissionToken(data))
            if resolved is None:
                # Keep the grant; the folder may come back (unmounted drive).
                refreshed.append(data)
                continue
            if resolved.folder in folders:
                changed = True
                continue
            if resolved.stale:
                try:
                    data = self.provider.mint(resolved.folder).data
                except AccessError as exc:
                    logger.warning("Could not refresh grant for %s: %s", resolved.folder, exc)
                changed = True
            with with_access(self.provider, resolved.folder) as granted:
                if not granted:
                    logger.warning("Access to %s was refused.", resolved.folder)
                    refreshed.append(data)
                    continue
            folders.append(resolved.folder)
            refreshed.append(data)

        if len(refreshed) > self.recent_limit:
            refreshed = refreshed[-self.recent_limit :]
            changed = True
        folders = folders[-self.recent_limit :]
        if changed:
            self._write(RECENT_FOLDERS_KEY, refreshed)
        return folders

    def _write(self, key: str, value: object) -> bool:
        try:
            self.backend.set(key, value)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
            logger.warning("Failed to persist folder grants to %s: %s", self.backend.path, exc)
            return False
        return True

    def _recent_tokens(self) -> list[str]:
        stored = self.backend.get(RECENT_FOLDERS_KEY, [])
        if not isinstance(stored, list):
            return []
        return [item for item in stored if isinstance(item, str)]

    def _resolve(self, token: PermissionToken, *, quiet: bool = False) -> ResolvedFolder | None:
        try:
            return self.provider.resolve(token)
        except AccessError as exc:
            if not quiet:
                logger.warning("Error restoring folder grant: %s", exc)
            return None
