"""Ordered list of images in the selected folder plus the focused position."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from ..models.base import ImageLocation, normalize_location
from ..utils.paths import allowed_extensions, list_image_files


def scan_folder(
    folder: Path,
    *,
    include_raw: bool = False,
    include_hidden: bool = False,
) -> list[ImageLocation]:
    """Return the allow-listed images directly inside ``folder``, sorted by name."""
    found = list_image_files(
        folder,
        include_hidden=include_hidden,
        extensions=allowed_extensions(include_raw=include_raw),
    )
    return [normalize_location(path) for path in found]


class ImageCatalog:
    """Holds the scanned images and which one is currently shown."""

    def __init__(self, images: Iterable[ImageLocation] = ()) -> None:
        self._images: tuple[ImageLocation, ...] = ()
        self._index: int | None = None
        self.set_catalog(images)

    @property
    def images(self) -> Sequence[ImageLocation]:
        return self._images

    @property
    def current_index(self) -> int | None:
        return self._index

    @property
    def current(self) -> ImageLocation | None:
        if self._index is None:
            return None
        return self._images[self._index]

    def set_catalog(self, images: Iterable[ImageLocation]) -> None:
        self._images = tuple(images)
        self._index = 0 if self._images else None

    def navigate(self, delta: int) -> bool:
        """Move the focus by ``delta``; out-of-range moves leave it unchanged."""
        if self._index is None:
            return False
        target = self._index + delta
        if target < 0 or target >= len(self._images):
            return False
        self._index = target
        return True

    def select(self, image: ImageLocation) -> bool:
        try:
            self._index = self._images.index(image)
        except ValueError:
            return False
        return True

    def can_go_back(self) -> bool:
        return self._index is not None and self._index > 0

    def can_go_forward(self) -> bool:
        return self._index is not None and self._index < len(self._images) - 1

    def __len__(self) -> int:
        return len(self._images)
