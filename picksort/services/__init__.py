"""Service layer: catalog, tag store, folder grants and distribution."""

from .catalog import ImageCatalog, scan_folder
from .distributor import BatchDistributor
from .permissions import (
    AccessError,
    DirectoryPermissionCache,
    FolderRole,
    LocalAccessProvider,
    PermissionToken,
    ResolvedFolder,
    with_access,
)
from .session import AppState, PickSortSession
from .tag_store import TagStore

__all__ = [
    "AccessError",
    "AppState",
    "BatchDistributor",
    "DirectoryPermissionCache",
    "FolderRole",
    "ImageCatalog",
    "LocalAccessProvider",
    "PermissionToken",
    "PickSortSession",
    "ResolvedFolder",
    "TagStore",
    "scan_folder",
    "with_access",
]
