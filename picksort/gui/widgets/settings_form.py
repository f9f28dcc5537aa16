"""Dialog that exposes application settings with validation."""

from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QMessageBox,
    QSpinBox,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ...config import AppConfig
from ...models.base import MAX_TAGS_PER_IMAGE, FolderNamePolicy

_POLICY_LABELS = {
    FolderNamePolicy.REJECT: "Skip tags that are not plain folder names",
    FolderNamePolicy.SANITIZE: "Replace unsafe characters with '-'",
    FolderNamePolicy.VERBATIM: "Use tags exactly as written",
}


class SettingsDialog(QDialog):
    """Shows a validated form for editing application configuration."""

    def __init__(self, config: AppConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self._original_config = config
        self._config: AppConfig | None = None
        self._field_min_width = 280

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)

        self.raw_check = QCheckBox("Show RAW files (RAF, NEF)")
        self.raw_check.setChecked(config.include_raw)

        self.hidden_check = QCheckBox("Include hidden files")
        self.hidden_check.setChecked(config.include_hidden)

        self.thumbnail_spin = QSpinBox()
        self.thumbnail_spin.setRange(32, 1024)
        self.thumbnail_spin.setSingleStep(16)
        self.thumbnail_spin.setValue(config.thumbnail_size)
        self._normalise_width(self.thumbnail_spin)

        self.recent_spin = QSpinBox()
        self.recent_spin.setRange(1, 100)
        self.recent_spin.setValue(config.recent_folder_limit)
        self._normalise_width(self.recent_spin)

        self.max_tags_spin = QSpinBox()
        self.max_tags_spin.setRange(1, MAX_TAGS_PER_IMAGE)
        self.max_tags_spin.setValue(config.max_tags_per_image)
        self._normalise_width(self.max_tags_spin)

        self.policy_combo = QComboBox()
        for policy, label in _POLICY_LABELS.items():
            self.policy_combo.addItem(label, policy.value)
        policy_index = self.policy_combo.findData(config.tag_folder_policy.value)
        self.policy_combo.setCurrentIndex(max(policy_index, 0))
        self._normalise_width(self.policy_combo)

        browsing_group = QGroupBox("Browsing")
        browsing_form = self._create_form_layout()
        browsing_form.addRow(
            "",
            self._with_help(
                self.raw_check,
                "RAW files",
                "List Fujifilm RAF and Nikon NEF files next to regular images. "
                "Previews for RAW files may be unavailable.",
            ),
        )
        browsing_form.addRow(
            "",
            self._with_help(
                self.hidden_check,
                "Hidden files",
                "Toggle whether dot-prefixed files are listed.",
            ),
        )
        browsing_form.addRow(
            "Thumbnail size",
            self._with_help(
                self.thumbnail_spin,
                "Thumbnail size",
                "Edge length in pixels of the thumbnails in the gallery strip.",
            ),
        )
        browsing_form.addRow(
            "Recent folders",
            self._with_help(
                self.recent_spin,
                "Recent folders",
                "How many folders the sidebar remembers.",
            ),
        )
        browsing_group.setLayout(browsing_form)
        main_layout.addWidget(browsing_group)

        tagging_group = QGroupBox("Tagging")
        tagging_form = self._create_form_layout()
        tagging_form.addRow(
            "Max tags",
            self._with_help(
                self.max_tags_spin,
                "Maximum tags",
                f"Upper limit on how many tags one image may hold (at most {MAX_TAGS_PER_IMAGE}).",
            ),
        )
        tagging_form.addRow(
            "Tag folders",
            self._with_help(
                self.policy_combo,
                "Tag folders",
                "Each tag becomes a folder in the destination. Choose what happens to tags "
                "containing path separators or other characters that are unsafe in folder names.",
            ),
        )
        tagging_group.setLayout(tagging_form)
        main_layout.addWidget(tagging_group)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        main_layout.addWidget(buttons, alignment=Qt.AlignmentFlag.AlignRight)

        self.setMinimumWidth(480)

    def _on_accept(self) -> None:
        data = self._original_config.as_dict()
        data.update(self._collect_form_data())
        try:
            self._config = AppConfig.model_validate(data)
        except Exception as exc:
            QMessageBox.critical(self, "Invalid settings", str(exc))
            return
        self.accept()

    def _collect_form_data(self) -> dict[str, object]:
        return {
            "include_raw": self.raw_check.isChecked(),
            "include_hidden": self.hidden_check.isChecked(),
            "thumbnail_size": self.thumbnail_spin.value(),
            "recent_folder_limit": self.recent_spin.value(),
            "max_tags_per_image": self.max_tags_spin.value(),
            "tag_folder_policy": self.policy_combo.currentData(),
        }

    def config(self) -> AppConfig:
        return self._config or self._original_config

    def _with_help(self, widget: QWidget, title: str, message: str) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(widget)
        layout.addStretch()
        layout.addWidget(self._make_help_button(title, message))
        self._normalise_width(container)
        return container

    def _make_help_button(self, title: str, message: str) -> QToolButton:
        button = QToolButton(self)
        button.setText("?")
        button.setAutoRaise(True)
        button.setFixedSize(24, 24)
        button.clicked.connect(partial(QMessageBox.information, self, title, message))
        return button

    def _normalise_width(self, widget: QWidget) -> None:
        widget.setMinimumWidth(self._field_min_width)

    def _create_form_layout(self) -> QFormLayout:
        layout = QFormLayout()
        layout.setFieldGrowthPolicy(QFormLayout.FieldGrowthPolicy.AllNonFixedFieldsGrow)
        layout.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return layout
