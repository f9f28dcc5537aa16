"""String helpers for tag matching and folder naming."""

from __future__ import annotations

import re
from typing import Sequence

from ..models.base import FolderNamePolicy

_HOSTILE_PATTERN = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def _fold(text: str) -> str:
    return text.casefold()


def filter_candidates(items: Sequence[str], text: str) -> list[str]:
    """Return the items containing ``text``, ignoring case, in their original order."""
    needle = _fold(text.strip())
    if not needle:
        return list(items)
    return [item for item in items if needle in _fold(item)]


def resolve_choice(items: Sequence[str], text: str, previous: str = "") -> str:
    """Pick the value a filtering combo box commits when editing ends.

    An exact (case-insensitive) match wins, then the first item containing
    ``text``. Otherwise the previous value is kept if it is still valid,
    falling back to the first item.
    """

    needle = _fold(text.strip())
    for item in items:
        if _fold(item) == needle:
            return item
    if needle:
        for item in items:
            if needle in _fold(item):
                return item
    if previous in items:
        return previous
    return items[0] if items else ""


def tag_folder_name(tag: str, policy: FolderNamePolicy) -> str | None:
    """Return the folder name used for ``tag`` or ``None`` if it must be skipped."""
    if policy == FolderNamePolicy.VERBATIM:
        return tag or None

    if policy == FolderNamePolicy.SANITIZE:
        replaced = _HOSTILE_PATTERN.sub("-", tag).strip().strip(".")
        collapsed = re.sub(r"-{2,}", "-", replaced).strip("-")
        return collapsed or None

    if not is_safe_folder_name(tag):
        return None
    return tag


def is_safe_folder_name(name: str) -> bool:
    """True when ``name`` stays a single child folder of its parent."""
    if not name or not name.strip():
        return False
    if name in {".", ".."}:
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return True
