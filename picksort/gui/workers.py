"""Qt worker objects that keep folder scans and thumbnails off the UI thread."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal
from PySide6.QtGui import QImage

from ..io.thumbnails import make_thumbnail


class ScanSignals(QObject):
    finished = Signal(object, object)
    error = Signal(object, str)


class ScanWorker(QRunnable):
    """Lists a folder; the receiver drops results for folders no longer selected."""

    def __init__(self, folder: Path, scan: Callable[[Path], list[Path]]) -> None:
        super().__init__()
        self.folder = folder
        self._scan = scan
        self.signals = ScanSignals()

    def run(self) -> None:
        try:
            images = self._scan(self.folder)
        except Exception as exc:  # pragma: no cover - safety net for GUI worker
            self.signals.error.emit(self.folder, str(exc))
            return
        self.signals.finished.emit(self.folder, images)


class ThumbnailSignals(QObject):
    ready = Signal(str, str, object)


class ThumbnailWorker(QRunnable):
    """Decodes one image with Pillow and hands back a ``QImage``."""

    def __init__(self, key: str, path: Path, size: int) -> None:
        super().__init__()
        self.key = key
        self.path = path
        self.size = size
        self.signals = ThumbnailSignals()

    def run(self) -> None:
        thumbnail = make_thumbnail(self.path, self.size)
        if thumbnail is None:
            self.signals.ready.emit(self.key, str(self.path), None)
            return
        rgba = thumbnail.convert("RGBA")
        data = rgba.tobytes("raw", "RGBA")
        image = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888)
        self.signals.ready.emit(self.key, str(self.path), image.copy())
