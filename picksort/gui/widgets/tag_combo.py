"""Editable combo box that filters the vocabulary as the user types."""

from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtCore import QStringListModel, Qt, Signal
from PySide6.QtWidgets import QComboBox, QCompleter, QWidget

from ...utils.text import filter_candidates, resolve_choice


class TagComboBox(QComboBox):
    """Offers substring matches and only commits values from the vocabulary.

    With an empty vocabulary any non-blank text is accepted.
    """

    tag_committed = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setEditable(True)
        self.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        self.setMaxVisibleItems(10)
        self.lineEdit().setPlaceholderText("Add tag…")

        self._items: list[str] = []
        self._committed = ""

        self._matches = QStringListModel(self)
        self._completer = QCompleter(self._matches, self)
        self._completer.setCompletionMode(QCompleter.CompletionMode.UnfilteredPopupCompletion)
        self._completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        self.setCompleter(self._completer)

        self.lineEdit().textEdited.connect(self._on_text_edited)
        self.lineEdit().returnPressed.connect(self._on_return_pressed)
        self._completer.activated.connect(self._commit)
        self.activated.connect(self._on_item_activated)

    def set_items(self, items: Iterable[str]) -> None:
        self._items = list(items)
        self.clear()
        self.addItems(self._items)
        self._matches.setStringList(self._items)
        if self._committed not in self._items:
            self._committed = ""
        self.setEditText("")

    def items(self) -> list[str]:
        return list(self._items)

    def _on_text_edited(self, text: str) -> None:
        matches = filter_candidates(self._items, text)
        self._matches.setStringList(matches)
        if matches and text:
            self._completer.complete()

    def _on_return_pressed(self) -> None:
        self._commit(self.currentText())

    def _on_item_activated(self, index: int) -> None:
        if 0 <= index < len(self._items):
            self._commit(self._items[index])

    def _commit(self, text: str) -> None:
        if self._items:
            choice = resolve_choice(self._items, text, self._committed)
        else:
            choice = text.strip()
        if not choice:
            return
        self._committed = choice
        self.setEditText("")
        self._matches.setStringList(self._items)
        self.tag_committed.emit(choice)
