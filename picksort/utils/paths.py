"""Path helpers used across the application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".heic", ".gif", ".tiff"})
RAW_EXTENSIONS = frozenset({".raf", ".nef"})


def allowed_extensions(*, include_raw: bool = False) -> frozenset[str]:
    """Return the extension allow-list, optionally including RAW formats."""
    if include_raw:
        return IMAGE_EXTENSIONS | RAW_EXTENSIONS
    return IMAGE_EXTENSIONS


def is_image_file(path: Path, *, extensions: Iterable[str] | None = None) -> bool:
    """Return True if the given path has an allow-listed extension."""
    exts = {ext.lower() for ext in (extensions or IMAGE_EXTENSIONS)}
    return path.suffix.lower() in exts


def list_image_files(
    folder: Path,
    *,
    include_hidden: bool = False,
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """List the images directly inside ``folder``, sorted by file name.

    Sub-directories are not traversed. An unreadable or missing folder
    yields an empty list; the caller decides how to surface that.
    """

    exts = list(extensions or IMAGE_EXTENSIONS)
    try:
        entries = list(folder.expanduser().iterdir())
    except OSError as exc:
        logger.warning("Unable to read folder %s: %s", folder, exc)
        return []

    collected: list[Path] = []
    for path in entries:
        if not include_hidden and _is_hidden(path):
            continue
        if not is_image_file(path, extensions=exts):
            continue
        try:
            if not path.is_file():
                continue
        except OSError:
            continue
        collected.append(path)

    collected.sort(key=lambda item: item.name)
    return collected


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")
