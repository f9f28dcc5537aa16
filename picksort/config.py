"""Application-wide configuration models and persistence helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .models.base import MAX_TAGS_PER_IMAGE, FolderNamePolicy


class AppConfig(BaseModel):
    """Validates and stores runtime settings for the application."""

    max_tags_per_image: int = Field(
        default=MAX_TAGS_PER_IMAGE,
        ge=1,
        le=MAX_TAGS_PER_IMAGE,
        description="Maximum number of tags an image may hold.",
    )
    include_raw: bool = Field(
        default=False,
        description="If true, RAW files (raf, nef) are listed alongside regular images.",
    )
    include_hidden: bool = Field(
        default=False,
        description="If true, include files that start with a dot when scanning folders.",
    )
    tag_folder_policy: FolderNamePolicy = Field(
        default=FolderNamePolicy.REJECT,
        description="How tag labels are turned into destination folder names.",
    )
    vocabulary_path: Path | None = Field(
        default=None,
        description="JSON document the tag vocabulary was last imported from.",
    )
    state_path: Path | None = Field(
        default=None,
        description="Optional override for the file holding tags and folder tokens.",
    )
    thumbnail_size: int = Field(
        default=160,
        ge=32,
        le=1024,
        description="Edge length in pixels of gallery thumbnails.",
    )
    recent_folder_limit: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of folders remembered in the sidebar.",
    )

    @model_validator(mode="after")
    def _expand_paths(self) -> AppConfig:
        if self.vocabulary_path is not None:
            self.vocabulary_path = self.vocabulary_path.expanduser()
        if self.state_path is not None:
            self.state_path = self.state_path.expanduser()
        return self

    def as_dict(self) -> dict[str, Any]:
        """Serialize the configuration to primitive Python types."""
        payload = self.model_dump(mode="json")
        for key in ("vocabulary_path", "state_path"):
            value = getattr(self, key)
            payload[key] = str(value) if value is not None else None
        return payload

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Load configuration from a YAML or JSON file."""
        data = _read_config_file(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration file at {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Persist configuration to a YAML file."""
        _write_config_file(path, self.as_dict())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping.")
    return data


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
