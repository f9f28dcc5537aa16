"""Main Qt window: folder sidebar, image gallery and tagging controls."""

from __future__ import annotations

from pathlib import Path

from PySide6 import QtCore
from PySide6.QtCore import QSize, Qt, QThreadPool
from PySide6.QtGui import QAction, QGuiApplication, QIcon, QImage, QKeySequence, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..config import AppConfig
from ..models.base import TagResult
from ..services.session import AppState, PickSortSession
from ..settings_store import SettingsStore
from .widgets.drop_target import FolderListWidget
from .widgets.progress_panel import ProgressPanel
from .widgets.settings_form import SettingsDialog
from .widgets.tag_combo import TagComboBox
from .workers import ScanWorker, ThumbnailWorker

PREVIEW_KEY = "preview"
PREVIEW_SIZE = 1600
_PATH_ROLE = Qt.ItemDataRole.UserRole


class MainWindow(QMainWindow):
    """Primary application window; renders :class:`AppState` snapshots."""

    def __init__(self, session: PickSortSession, settings_store: SettingsStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle("PickSort")
        self.resize(1200, 760)

        self.session = session
        self.settings_store = settings_store or SettingsStore()
        self.thread_pool = QThreadPool()
        self._workers: set[object] = set()
        self._strip_items: dict[str, QListWidgetItem] = {}
        self._shown_images: tuple[Path, ...] | None = None
        self._shown_preview: Path | None = None
        self._shown_vocabulary: tuple = ()
        self._cursor_busy = False
        self._busy = False
        self._menu_actions: list[QAction] = []

        self._build_ui()
        self._build_menus()
        self._unsubscribe = session.subscribe(self._render)
        self._render(session.state)

    def _build_ui(self) -> None:
        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        # Sidebar
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(8, 8, 8, 8)
        self.folder_list = FolderListWidget()
        self.folder_list.folder_selected.connect(self._on_folder_selected)
        self.folder_list.folders_dropped.connect(self._on_folders_dropped)
        self.folder_list.remove_requested.connect(self.session.remove_recent_folder)
        self.add_folder_btn = QPushButton("Add Folder…")
        self.add_folder_btn.clicked.connect(self._choose_source)
        sidebar_layout.addWidget(self.folder_list, stretch=1)
        sidebar_layout.addWidget(self.add_folder_btn)

        # Gallery
        gallery = QWidget()
        gallery_layout = QVBoxLayout(gallery)
        gallery_layout.setContentsMargins(8, 8, 8, 8)
        self.preview_label = QLabel("Select a folder")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumSize(320, 240)
        self.preview_label.setStyleSheet("background: #1a1a1a; color: #aaaaaa; border-radius: 10px;")

        nav_row = QHBoxLayout()
        self.prev_btn = QPushButton("◀")
        self.prev_btn.clicked.connect(lambda: self.session.navigate(-1))
        self.next_btn = QPushButton("▶")
        self.next_btn.clicked.connect(lambda: self.session.navigate(1))
        self.name_label = QLabel("No Image")
        self.name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        nav_row.addWidget(self.prev_btn)
        nav_row.addWidget(self.name_label, stretch=1)
        nav_row.addWidget(self.next_btn)

        self.strip = QListWidget()
        self.strip.setViewMode(QListView.ViewMode.IconMode)
        self.strip.setFlow(QListView.Flow.LeftToRight)
        self.strip.setWrapping(False)
        self.strip.setMovement(QListView.Movement.Static)
        self.strip.itemClicked.connect(self._on_strip_clicked)

        gallery_layout.addWidget(self.preview_label, stretch=1)
        gallery_layout.addLayout(nav_row)
        gallery_layout.addWidget(self.strip)

        # Controls
        controls = QWidget()
        controls_layout = QVBoxLayout(controls)
        controls_layout.setContentsMargins(8, 8, 8, 8)
        controls_layout.setSpacing(8)

        self.vocabulary_label = QLabel("Tags file: none")
        self.vocabulary_label.setWordWrap(True)
        self.vocabulary_btn = QPushButton("Select JSON…")
        self.vocabulary_btn.clicked.connect(self._choose_vocabulary)

        self.tag_combo = TagComboBox()
        self.tag_combo.tag_committed.connect(self._on_tag_committed)
        self.remove_tag_btn = QPushButton("Remove Last Tag")
        self.remove_tag_btn.clicked.connect(self.session.remove_last_tag)
        self.tags_view = QListWidget()
        self.tags_view.setViewMode(QListView.ViewMode.IconMode)
        self.tags_view.setWrapping(True)
        self.tags_view.setSpacing(4)

        self.destination_label = QLabel("Destination: (Not Selected)")
        self.destination_label.setWordWrap(True)
        self.destination_btn = QPushButton("Select Destination…")
        self.destination_btn.clicked.connect(self._choose_destination)
        self.process_btn = QPushButton("Copy Tagged Images")
        self.process_btn.clicked.connect(self._process)
        self.progress_panel = ProgressPanel()

        controls_layout.addWidget(self.vocabulary_label)
        controls_layout.addWidget(self.vocabulary_btn)
        controls_layout.addWidget(self.tag_combo)
        controls_layout.addWidget(self.tags_view, stretch=1)
        controls_layout.addWidget(self.remove_tag_btn)
        controls_layout.addWidget(self.destination_label)
        controls_layout.addWidget(self.destination_btn)
        controls_layout.addWidget(self.process_btn)
        controls_layout.addWidget(self.progress_panel)

        splitter.addWidget(sidebar)
        splitter.addWidget(gallery)
        splitter.addWidget(controls)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([180, 720, 300])

        self.setStatusBar(QStatusBar())

    def _build_menus(self) -> None:
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File")
        self._menu_actions.append(file_menu.addAction("Add Folder…", self._choose_source))
        self._menu_actions.append(file_menu.addAction("Select Destination…", self._choose_destination))
        self._menu_actions.append(file_menu.addAction("Load Tags JSON…", self._choose_vocabulary))
        file_menu.addSeparator()
        self._menu_actions.append(file_menu.addAction("Settings…", self._open_settings))

        go_menu = menu_bar.addMenu("&Go")
        previous_action = go_menu.addAction("Previous Image", lambda: self.session.navigate(-1))
        previous_action.setShortcut(QKeySequence("Alt+Left"))
        next_action = go_menu.addAction("Next Image", lambda: self.session.navigate(1))
        next_action.setShortcut(QKeySequence("Alt+Right"))
        self._menu_actions.extend((previous_action, next_action))

    # --- Rendering -------------------------------------------------------

    def _render(self, state: AppState) -> None:
        self.folder_list.set_folders(state.recent_folders, state.source_folder)

        if state.images != self._shown_images:
            self._rebuild_strip(state.images)
        self._highlight_current(state)
        self._render_preview(state)

        if state.vocabulary != self._shown_vocabulary:
            self._shown_vocabulary = state.vocabulary
            self.tag_combo.set_items(tag.title for tag in state.vocabulary)
            for index, tag in enumerate(state.vocabulary):
                self.tag_combo.setItemData(index, tag.display_text, Qt.ItemDataRole.ToolTipRole)
        if state.vocabulary_path is not None:
            self.vocabulary_label.setText(f"Tags file: {state.vocabulary_path.name}")
            self.vocabulary_btn.setText("Reload JSON…")

        self.tags_view.clear()
        self.tags_view.addItems(list(state.current_tags))

        if state.destination_folder is not None:
            self.destination_label.setText(f"Destination: {state.destination_folder.name}")
            self.destination_label.setToolTip(str(state.destination_folder))

        # Controls stay locked while a copy run is in progress.
        idle = not self._busy
        has_image = idle and state.current_image is not None
        self.tag_combo.setEnabled(has_image)
        self.remove_tag_btn.setEnabled(has_image and bool(state.current_tags))
        self.prev_btn.setEnabled(has_image and state.current_index > 0)
        self.next_btn.setEnabled(has_image and state.current_index < len(state.images) - 1)
        self.process_btn.setEnabled(idle and state.destination_folder is not None)
        self.statusBar().showMessage(state.status)

    def _rebuild_strip(self, images: tuple[Path, ...]) -> None:
        self._shown_images = images
        self._strip_items.clear()
        self.strip.clear()
        size = self.session.config.thumbnail_size
        self.strip.setIconSize(QSize(size, size))
        self.strip.setFixedHeight(size + 48)
        for image in images:
            item = QListWidgetItem(image.name)
            item.setData(_PATH_ROLE, str(image))
            item.setToolTip(str(image))
            self.strip.addItem(item)
            self._strip_items[str(image)] = item
            self._request_thumbnail(str(image), image, size)

    def _highlight_current(self, state: AppState) -> None:
        image = state.current_image
        if image is None:
            return
        item = self._strip_items.get(str(image))
        if item is not None and self.strip.currentItem() is not item:
            self.strip.setCurrentItem(item)
            self.strip.scrollToItem(item)

    def _render_preview(self, state: AppState) -> None:
        image = state.current_image
        if image is None:
            self._shown_preview = None
            self.preview_label.setPixmap(QPixmap())
            self.preview_label.setText("Select a folder" if state.source_folder is None else "No images found")
            self.name_label.setText("No Image")
            return
        self.name_label.setText(image.name)
        if image != self._shown_preview:
            self._shown_preview = image
            self.preview_label.setPixmap(QPixmap())
            self.preview_label.setText("Loading…")
            self._request_thumbnail(PREVIEW_KEY, image, PREVIEW_SIZE)

    # --- Background work ------------------------------------------------

    def _request_thumbnail(self, key: str, path: Path, size: int) -> None:
        worker = ThumbnailWorker(key, path, size)
        worker.signals.ready.connect(self._on_thumbnail_ready)
        self._workers.add(worker)
        worker.signals.ready.connect(lambda *_: self._workers.discard(worker))
        self.thread_pool.start(worker)

    def _on_thumbnail_ready(self, key: str, path: str, image: QImage | None) -> None:
        if key == PREVIEW_KEY:
            if self._shown_preview is None or str(self._shown_preview) != path:
                return
            if image is None:
                self.preview_label.setText("Preview unavailable")
                return
            pixmap = QPixmap.fromImage(image).scaled(
                self.preview_label.size(),
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
            self.preview_label.setText("")
            self.preview_label.setPixmap(pixmap)
            return

        item = self._strip_items.get(key)
        if item is not None and image is not None:
            item.setIcon(QIcon(QPixmap.fromImage(image)))

    def _start_scan(self, folder: Path) -> None:
        worker = ScanWorker(folder, self.session.scan)
        worker.signals.finished.connect(self._on_scan_finished)
        worker.signals.error.connect(self._on_scan_error)
        self._workers.add(worker)
        self.thread_pool.start(worker)

    def _on_scan_finished(self, folder: Path, images: list[Path]) -> None:
        self._forget_scan_worker(folder)
        self.session.apply_scan(folder, images)

    def _on_scan_error(self, folder: Path, message: str) -> None:
        self._forget_scan_worker(folder)
        QMessageBox.warning(self, "Unable to read folder", f"{folder}\n\n{message}")

    def _forget_scan_worker(self, folder: Path) -> None:
        for worker in list(self._workers):
            if isinstance(worker, ScanWorker) and worker.folder == folder:
                self._workers.discard(worker)

    # --- Event handlers -------------------------------------------------

    def _choose_source(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Choose image folder")
        if directory:
            self._on_folder_selected(Path(directory))

    def _on_folder_selected(self, folder: Path) -> None:
        self.session.select_source(folder, scan=False)
        source = self.session.state.source_folder
        if source is not None:
            self._start_scan(source)

    def _on_folders_dropped(self, folders: list[Path]) -> None:
        for folder in folders:
            self.session.add_recent_folder(folder)

    def _on_strip_clicked(self, item: QListWidgetItem) -> None:
        self.session.select_image(Path(item.data(_PATH_ROLE)))

    def _on_tag_committed(self, tag: str) -> None:
        result = self.session.add_tag(tag)
        if result == TagResult.LIMIT_EXCEEDED:
            QApplication.beep()

    def _choose_destination(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Select destination folder")
        if directory:
            self.session.select_destination(Path(directory))

    def _choose_vocabulary(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select a JSON file", "", "JSON (*.json)")
        if not path:
            return
        if not self.session.import_vocabulary(Path(path)):
            QMessageBox.warning(self, "Invalid tags file", self.session.state.status)
            return
        config = self.session.config.model_copy(update={"vocabulary_path": Path(path)})
        self._apply_new_config(config)

    def _process(self) -> None:
        if self._busy:
            return
        self._set_busy(True)
        try:
            report = self.session.process(progress_callback=self._on_progress)
        finally:
            self._set_busy(False)
        if report is None:
            return
        self.progress_panel.show_report(report)
        if report.failed:
            QMessageBox.warning(
                self,
                "Some files were not copied",
                f"{report.copied} copied, {report.failed} failed.",
            )

    def _on_progress(self, current: int, total: int, path: Path) -> None:
        self.progress_panel.update_progress(current, total, path.name)
        QApplication.processEvents()

    def _set_busy(self, active: bool) -> None:
        self._busy = active
        for widget in (
            self.add_folder_btn,
            self.vocabulary_btn,
            self.destination_btn,
            self.process_btn,
            self.tag_combo,
            self.remove_tag_btn,
            self.prev_btn,
            self.next_btn,
            self.strip,
            self.folder_list,
        ):
            widget.setEnabled(not active)
        for action in self._menu_actions:
            action.setEnabled(not active)
        if active and not self._cursor_busy:
            QGuiApplication.setOverrideCursor(QtCore.Qt.CursorShape.WaitCursor)
            self._cursor_busy = True
        elif not active and self._cursor_busy:
            QGuiApplication.restoreOverrideCursor()
            self._cursor_busy = False
            self._render(self.session.state)

    def _open_settings(self) -> None:
        dialog = SettingsDialog(self.session.config, self)
        if dialog.exec() != dialog.DialogCode.Accepted:
            return
        self._apply_new_config(dialog.config())
        self._shown_images = None
        self._render(self.session.state)
        source = self.session.state.source_folder
        if source is not None:
            self._start_scan(source)

    def _apply_new_config(self, config: AppConfig) -> None:
        self.session.apply_config(config)
        self.settings_store.save(config)

    def closeEvent(self, event) -> None:
        self._unsubscribe()
        self.thread_pool.waitForDone(2000)
        super().closeEvent(event)
