"""Top-level package for the PickSort image tagging tool."""

from .config import AppConfig
from .io.key_value import KeyValueStore
from .models.base import FolderNamePolicy, TagResult
from .services.session import AppState, PickSortSession
from .settings_store import SettingsStore

__all__ = [
    "AppConfig",
    "AppState",
    "FolderNamePolicy",
    "KeyValueStore",
    "PickSortSession",
    "SettingsStore",
    "TagResult",
]
