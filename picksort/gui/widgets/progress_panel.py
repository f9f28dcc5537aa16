"""Widget showing distribution progress and the final counts."""

from __future__ import annotations

from PySide6.QtWidgets import QLabel, QProgressBar, QVBoxLayout, QWidget

from ...models.base import DistributionReport


class ProgressPanel(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setValue(0)

        self._status = QLabel("Idle")
        self._status.setWordWrap(True)

        layout.addWidget(self._progress)
        layout.addWidget(self._status)

    def reset(self) -> None:
        self._progress.setRange(0, 100)
        self._progress.setValue(0)
        self._status.setText("Idle")

    def update_progress(self, current: int, total: int, name: str) -> None:
        if total <= 0:
            self._progress.setRange(0, 0)
            self._status.setText("Working…")
            return
        self._progress.setRange(0, total)
        self._progress.setValue(current)
        self._status.setText(f"Copying {name}")

    def show_report(self, report: DistributionReport) -> None:
        self._progress.setRange(0, 100)
        self._progress.setValue(100)
        text = f"Copied {report.copied} files"
        if report.skipped:
            text += f", {report.skipped} already present"
        if report.failed:
            text += f", {report.failed} failed"
        self._status.setText(text)
        if report.failures:
            self._status.setToolTip(
                "\n".join(f"{item.image_path.name} → {item.tag}: {item.message}" for item in report.failures)
            )
        else:
            self._status.setToolTip("")
