"""Import tag vocabularies from JSON documents."""

from __future__ import annotations

import json
from pathlib import Path

from ..models.base import ImageTag


class VocabularyError(ValueError):
    """Raised when a vocabulary document cannot be used."""


def load_vocabulary(path: Path) -> list[ImageTag]:
    """Read a flat array of names or an array of ``{"name", "nickname"}`` objects."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise VocabularyError(f"Unable to read {path}: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise VocabularyError(f"{path.name} is not valid JSON: {exc}") from exc

    return parse_vocabulary(payload)


def parse_vocabulary(payload: object) -> list[ImageTag]:
    if not isinstance(payload, list):
        raise VocabularyError("A tag vocabulary must be a JSON array.")

    tags: list[ImageTag] = []
    seen: set[str] = set()
    for index, entry in enumerate(payload):
        try:
            tag = ImageTag.from_payload(entry)
        except ValueError as exc:
            raise VocabularyError(f"Entry {index}: {exc}") from exc
        if tag.title in seen:
            continue
        seen.add(tag.title)
        tags.append(tag)
    return tags
