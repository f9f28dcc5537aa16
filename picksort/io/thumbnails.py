"""Generate preview thumbnails with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


def make_thumbnail(path: Path, size: int) -> Image.Image | None:
    """Return an RGB(A) thumbnail no larger than ``size`` x ``size``.

    Files Pillow cannot decode (RAW formats without a plugin, truncated
    files) produce ``None``.
    """

    try:
        with Image.open(path) as image:
            oriented = ImageOps.exif_transpose(image)
            oriented.thumbnail((size, size))
            if oriented.mode not in {"RGB", "RGBA"}:
                oriented = oriented.convert("RGBA" if "A" in oriented.getbands() else "RGB")
            oriented.load()
            return oriented.copy()
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.debug("No thumbnail for %s: %s", path, exc)
        return None
