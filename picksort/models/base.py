"""Core value types shared by the catalog, tag store and distributor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Mapping

MAX_TAGS_PER_IMAGE = 32

# Images are keyed by their normalised absolute path.
ImageLocation = Path


def normalize_location(path: str | Path) -> ImageLocation:
    """Return the canonical location used as a tag store key.

    The containing folder is resolved; the entry itself is not, so a
    symlinked image keeps the name it was listed under.
    """
    absolute = Path(os.path.normpath(Path(path).expanduser().absolute()))
    return absolute.parent.resolve() / absolute.name


def location_key(location: ImageLocation) -> str:
    return str(location)


def parse_location(key: object) -> ImageLocation | None:
    """Turn a persisted key back into a location, or ``None`` if it is unusable."""
    if not isinstance(key, str):
        return None
    text = key.strip()
    if not text or "\x00" in text:
        return None
    if text.startswith("file://"):
        text = text[len("file://") :]
    path = Path(text)
    if not path.is_absolute():
        return None
    return normalize_location(path)


class TagResult(str, Enum):
    """Outcome of a tag mutation."""

    ADDED = "added"
    REMOVED = "removed"
    DUPLICATE = "duplicate"
    LIMIT_EXCEEDED = "limit_exceeded"
    EMPTY = "empty"
    INVALID = "invalid"

    @property
    def ok(self) -> bool:
        return self in (TagResult.ADDED, TagResult.REMOVED)


class FolderNamePolicy(str, Enum):
    """Ways of turning a tag label into a destination folder name."""

    VERBATIM = "verbatim"
    SANITIZE = "sanitize"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class ImageTag:
    """A vocabulary entry with a canonical title and optional display alias."""

    title: str
    nickname: str | None = None

    @property
    def display_text(self) -> str:
        if self.nickname:
            return f"{self.title} ({self.nickname})"
        return self.title

    @classmethod
    def from_payload(cls, payload: object) -> ImageTag:
        """Build a tag from a plain string or a ``{"name", "nickname"}`` object."""
        if isinstance(payload, str):
            title = payload.strip()
            nickname = None
        elif isinstance(payload, Mapping):
            name = payload.get("name")
            if not isinstance(name, str):
                raise ValueError("Tag objects require a string 'name' field.")
            title = name.strip()
            raw_nickname = payload.get("nickname")
            if raw_nickname is not None and not isinstance(raw_nickname, str):
                raise ValueError(f"Nickname for tag {title!r} must be a string.")
            nickname = raw_nickname.strip() if raw_nickname else None
        else:
            raise ValueError(f"Unsupported tag entry: {payload!r}")
        if not title:
            raise ValueError("Tag names must not be blank.")
        return cls(title=title, nickname=nickname or None)


class TagAssignment:
    """Insertion-ordered set of tag labels attached to one image."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags: list[str] = []
        for tag in tags:
            if tag not in self._tags:
                self._tags.append(tag)

    def add(self, tag: str, *, limit: int = MAX_TAGS_PER_IMAGE) -> TagResult:
        if len(self._tags) >= limit:
            return TagResult.LIMIT_EXCEEDED
        if tag in self._tags:
            return TagResult.DUPLICATE
        self._tags.append(tag)
        return TagResult.ADDED

    def remove_last(self) -> TagResult:
        if not self._tags:
            return TagResult.EMPTY
        self._tags.pop()
        return TagResult.REMOVED

    def as_list(self) -> list[str]:
        return list(self._tags)

    def copy(self) -> TagAssignment:
        return TagAssignment(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagAssignment):
            return self._tags == other._tags
        return NotImplemented

    def __repr__(self) -> str:
        return f"TagAssignment({self._tags!r})"


@dataclass(slots=True)
class CopyFailure:
    """A single (image, tag) pair that could not be distributed."""

    image_path: Path
    tag: str
    message: str


@dataclass(slots=True)
class DistributionReport:
    """Counts produced by one pass of the batch distributor."""

    copied: int = 0
    failed: int = 0
    skipped: int = 0
    failures: list[CopyFailure] = field(default_factory=list)

    def record_failure(self, image_path: Path, tag: str, message: str) -> None:
        self.failed += 1
        self.failures.append(CopyFailure(image_path=image_path, tag=tag, message=message))

    def as_dict(self) -> dict[str, object]:
        return {
            "copied": self.copied,
            "failed": self.failed,
            "skipped": self.skipped,
            "failures": [
                {"image": str(item.image_path), "tag": item.tag, "error": item.message}
                for item in self.failures
            ],
        }
