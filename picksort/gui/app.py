"""Application bootstrap for the Qt-based GUI."""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from ..io.key_value import KeyValueStore
from ..services.session import PickSortSession
from ..settings_store import SettingsStore
from .main_window import MainWindow


def run_app(*, settings_path: Path | None = None, state_path: Path | None = None) -> None:
    """Launch the GUI application."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("PickSort")

    settings_store = SettingsStore(settings_path)
    config = settings_store.load()
    session = PickSortSession(config, KeyValueStore(state_path or settings_store.state_path(config)))

    window = MainWindow(session, settings_store)
    window.show()
    session.restore()
    app.exec()
