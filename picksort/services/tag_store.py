"""Mapping from images to their tags, persisted after every change."""

from __future__ import annotations

import logging
from typing import Any

import yaml

from ..io.key_value import KeyValueStore
from ..models.base import (
    MAX_TAGS_PER_IMAGE,
    ImageLocation,
    TagAssignment,
    TagResult,
    location_key,
    parse_location,
)

logger = logging.getLogger(__name__)

TAGS_KEY = "imageTags"


class TagStore:
    """Per-image tag sets with an upper bound on how many tags an image holds.

    When a :class:`KeyValueStore` is attached, each successful mutation
    writes the whole mapping back immediately.
    """

    def __init__(
        self,
        backend: KeyValueStore | None = None,
        *,
        max_tags: int = MAX_TAGS_PER_IMAGE,
        key: str = TAGS_KEY,
    ) -> None:
        self.backend = backend
        self.max_tags = max_tags
        self.key = key
        self._assignments: dict[ImageLocation, TagAssignment] = {}

    def tags_for(self, image: ImageLocation) -> TagAssignment:
        assignment = self._assignments.get(image)
        return assignment.copy() if assignment is not None else TagAssignment()

    def add_tag(self, image: ImageLocation, tag: str) -> TagResult:
        label = tag.strip()
        if not label:
            return TagResult.INVALID
        assignment = self._assignments.setdefault(image, TagAssignment())
        result = assignment.add(label, limit=self.max_tags)
        if not assignment:
            del self._assignments[image]
        if result.ok:
            self.save()
        else:
            logger.debug("Tag %r not added to %s: %s", label, image, result.value)
        return result

    def remove_last_tag(self, image: ImageLocation) -> TagResult:
        assignment = self._assignments.get(image)
        if assignment is None:
            return TagResult.EMPTY
        result = assignment.remove_last()
        if not assignment:
            del self._assignments[image]
        if result.ok:
            self.save()
        return result

    def all_assignments(self) -> dict[ImageLocation, TagAssignment]:
        return {image: tags.copy() for image, tags in self._assignments.items()}

    def clear(self) -> None:
        self._assignments.clear()
        self.save()

    def __len__(self) -> int:
        return len(self._assignments)

    # --- Persistence ---------------------------------------------------

    def to_payload(self) -> dict[str, list[str]]:
        payload: dict[str, list[str]] = {}
        for image, tags in self._assignments.items():
            key = location_key(image)
            try:
                key.encode("utf-8")
            except UnicodeEncodeError:
                # Undecodable file names stay in memory only.
                logger.warning("Not persisting tags for %r: file name is not valid UTF-8", key)
                continue
            payload[key] = tags.as_list()
        return payload

    def save(self) -> None:
        if self.backend is None:
            return
        try:
            self.backend.set(self.key, self.to_payload())
        except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
            logger.warning("Failed to persist tags to %s: %s", self.backend.path, exc)

    def load(self) -> None:
        """Replace the in-memory mapping with the persisted one.

        Entries whose key is no longer a usable location are skipped. A
        payload of the wrong shape leaves the store empty.
        """
        self._assignments = {}
        if self.backend is None:
            return
        payload = self.backend.get(self.key)
        if payload is None:
            return
        self._assignments = self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> dict[ImageLocation, TagAssignment]:
        if not isinstance(payload, dict):
            logger.warning("Discarding persisted tags: expected a mapping, got %s", type(payload).__name__)
            return {}

        restored: dict[ImageLocation, TagAssignment] = {}
        for raw_key, raw_tags in payload.items():
            image = parse_location(raw_key)
            if image is None:
                logger.info("Skipping persisted tags for unreadable key %r", raw_key)
                continue
            if not isinstance(raw_tags, list):
                logger.info("Skipping persisted tags for %s: not a list", image)
                continue
            assignment = TagAssignment()
            for tag in raw_tags:
                if isinstance(tag, str) and tag.strip():
                    assignment.add(tag.strip(), limit=self.max_tags)
            if assignment:
                restored[image] = assignment
        return restored
