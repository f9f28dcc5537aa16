"""Sidebar list of remembered folders that also accepts dropped folders."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QDragEnterEvent, QDropEvent
from PySide6.QtWidgets import QListWidget, QListWidgetItem, QMenu, QWidget

_PATH_ROLE = Qt.ItemDataRole.UserRole


class FolderListWidget(QListWidget):
    folder_selected = Signal(object)
    folders_dropped = Signal(object)
    remove_requested = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.setToolTip("Drop folders here to add them.")
        self.customContextMenuRequested.connect(self._show_context_menu)
        self.itemClicked.connect(self._on_item_clicked)

    def set_folders(self, folders: tuple[Path, ...], selected: Path | None) -> None:
        self.blockSignals(True)
        self.clear()
        for folder in folders:
            item = QListWidgetItem(folder.name or str(folder))
            item.setData(_PATH_ROLE, str(folder))
            item.setToolTip(str(folder))
            self.addItem(item)
            if folder == selected:
                item.setSelected(True)
                self.setCurrentItem(item)
        self.blockSignals(False)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.folder_selected.emit(Path(item.data(_PATH_ROLE)))

    def _show_context_menu(self, position) -> None:
        item = self.itemAt(position)
        if item is None:
            return
        menu = QMenu(self)
        remove_action = menu.addAction("Remove")
        chosen = menu.exec(self.viewport().mapToGlobal(position))
        if chosen is remove_action:
            self.remove_requested.emit(Path(item.data(_PATH_ROLE)))

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        folders = [
            Path(url.toLocalFile())
            for url in event.mimeData().urls()
            if url.isLocalFile() and Path(url.toLocalFile()).is_dir()
        ]
        if not folders:
            event.ignore()
            return
        self.folders_dropped.emit(folders)
        event.acceptProposedAction()
