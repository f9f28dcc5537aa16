"""Application state and the intents that change it.

The session owns every component and publishes an immutable
:class:`AppState` snapshot to subscribers after each change. Views only
read snapshots and call intents; they never talk to each other.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from ..config import AppConfig
from ..io.key_value import KeyValueStore
from ..io.vocabulary import VocabularyError, load_vocabulary
from ..models.base import DistributionReport, ImageLocation, ImageTag, TagResult
from .catalog import ImageCatalog, scan_folder
from .distributor import BatchDistributor, ProgressCallback
from .permissions import AccessProvider, DirectoryPermissionCache, FolderRole
from .tag_store import TagStore

logger = logging.getLogger(__name__)

Subscriber = Callable[["AppState"], None]


@dataclass(frozen=True, slots=True)
class AppState:
    """Snapshot of everything the interface displays."""

    source_folder: Path | None = None
    destination_folder: Path | None = None
    images: tuple[ImageLocation, ...] = ()
    current_index: int | None = None
    current_tags: tuple[str, ...] = ()
    vocabulary: tuple[ImageTag, ...] = ()
    vocabulary_path: Path | None = None
    recent_folders: tuple[Path, ...] = ()
    last_report: DistributionReport | None = None
    status: str = ""

    @property
    def current_image(self) -> ImageLocation | None:
        if self.current_index is None:
            return None
        return self.images[self.current_index]


class PickSortSession:
    """Single owner of the catalog, tag store, folder grants and distributor."""

    def __init__(
        self,
        config: AppConfig,
        backend: KeyValueStore,
        *,
        provider: AccessProvider | None = None,
    ) -> None:
        self.config = config
        self.backend = backend
        self.catalog = ImageCatalog()
        self.tags = TagStore(backend, max_tags=config.max_tags_per_image)
        self.permissions = DirectoryPermissionCache(
            backend, provider, recent_limit=config.recent_folder_limit
        )
        self.distributor = BatchDistributor(
            self.permissions.provider, folder_policy=config.tag_folder_policy
        )
        self._state = AppState()
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def apply_config(self, config: AppConfig) -> None:
        """Switch to new settings without losing tags or the current selection."""
        self.config = config
        self.tags.max_tags = config.max_tags_per_image
        self.permissions.recent_limit = config.recent_folder_limit
        self.distributor.folder_policy = config.tag_folder_policy

    # --- Start-up -----------------------------------------------------

    def restore(self) -> AppState:
        """Hydrate tags, folders and vocabulary from persisted state."""
        self.tags.load()
        self._publish(recent_folders=tuple(self.permissions.restore_recent()))

        if self.config.vocabulary_path is not None and self.config.vocabulary_path.exists():
            self.import_vocabulary(self.config.vocabulary_path)

        destination = self.permissions.restore(FolderRole.DESTINATION)
        if destination is not None:
            self._publish(destination_folder=destination)

        source = self.permissions.restore(FolderRole.SOURCE)
        if source is not None:
            self.select_source(source)
        return self._state

    # --- Source folder and catalog -------------------------------------

    def scan(self, folder: Path) -> list[ImageLocation]:
        return scan_folder(
            folder,
            include_raw=self.config.include_raw,
            include_hidden=self.config.include_hidden,
        )

    def select_source(self, folder: Path, *, scan: bool = True) -> None:
        """Make ``folder`` the source; with ``scan=False`` the caller scans later."""
        folder = folder.expanduser().resolve()
        self.permissions.remember(FolderRole.SOURCE, folder)
        if self.permissions.add_recent(folder):
            recent = tuple(self.permissions.restore_recent())
        else:
            recent = self._state.recent_folders
        self.catalog.set_catalog(())
        self._publish(
            source_folder=folder,
            recent_folders=recent,
            status=f"Scanning {folder.name}…",
            **self._catalog_fields(),
        )
        if scan:
            self.apply_scan(folder, self.scan(folder))

    def apply_scan(self, folder: Path, images: list[ImageLocation]) -> bool:
        """Install scan results unless a newer folder has been selected since."""
        if self._state.source_folder != folder:
            logger.debug("Discarding stale scan of %s", folder)
            return False
        self.catalog.set_catalog(images)
        status = f"{len(images)} images in {folder.name}" if images else "No images found"
        self._publish(status=status, **self._catalog_fields())
        return True

    def navigate(self, delta: int) -> bool:
        moved = self.catalog.navigate(delta)
        if moved:
            self._publish(**self._catalog_fields())
        return moved

    def select_image(self, image: ImageLocation) -> bool:
        selected = self.catalog.select(image)
        if selected:
            self._publish(**self._catalog_fields())
        return selected

    # --- Tags -----------------------------------------------------------

    def add_tag(self, tag: str) -> TagResult:
        image = self.catalog.current
        if image is None:
            return TagResult.INVALID
        result = self.tags.add_tag(image, tag)
        if result == TagResult.LIMIT_EXCEEDED:
            self._publish(status=f"{image.name} already has {self.tags.max_tags} tags")
        elif result.ok:
            self._publish(**self._catalog_fields())
        return result

    def remove_last_tag(self) -> TagResult:
        image = self.catalog.current
        if image is None:
            return TagResult.EMPTY
        result = self.tags.remove_last_tag(image)
        if result.ok:
            self._publish(**self._catalog_fields())
        return result

    def import_vocabulary(self, path: Path) -> bool:
        """Replace the candidate tag list; a bad document keeps the old one."""
        try:
            vocabulary = load_vocabulary(path)
        except VocabularyError as exc:
            logger.warning("Failed to load tag vocabulary: %s", exc)
            self._publish(status=f"Could not load {path.name}: {exc}")
            return False
        self._publish(
            vocabulary=tuple(vocabulary),
            vocabulary_path=path,
            status=f"Loaded {len(vocabulary)} tags from {path.name}",
        )
        return True

    def vocabulary_titles(self) -> list[str]:
        return [tag.title for tag in self._state.vocabulary]

    # --- Recent folders -------------------------------------------------

    def add_recent_folder(self, folder: Path) -> bool:
        added = self.permissions.add_recent(folder)
        if added:
            self._publish(recent_folders=tuple(self.permissions.restore_recent()))
        return added

    def remove_recent_folder(self, folder: Path) -> bool:
        removed = self.permissions.remove_recent(folder)
        if removed:
            self._publish(recent_folders=tuple(self.permissions.restore_recent()))
        return removed

    # --- Destination and distribution -------------------------------------

    def select_destination(self, folder: Path) -> None:
        folder = folder.expanduser().resolve()
        self.permissions.remember(FolderRole.DESTINATION, folder)
        self._publish(destination_folder=folder, status=f"Destination: {folder.name}")

    def process(self, *, progress_callback: ProgressCallback | None = None) -> DistributionReport | None:
        destination = self._state.destination_folder
        if destination is None:
            self._publish(status="Select a destination folder first")
            return None
        report = self.distributor.distribute(
            self.tags.all_assignments(),
            destination,
            progress_callback=progress_callback,
        )
        self._publish(
            last_report=report,
            status=f"Copied {report.copied} files, {report.failed} failed",
        )
        return report

    # --- Internals --------------------------------------------------------

    def _catalog_fields(self) -> dict[str, object]:
        image = self.catalog.current
        tags = tuple(self.tags.tags_for(image)) if image is not None else ()
        return {
            "images": tuple(self.catalog.images),
            "current_index": self.catalog.current_index,
            "current_tags": tags,
        }

    def _publish(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        for callback in list(self._subscribers):
            callback(self._state)
