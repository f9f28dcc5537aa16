"""Value types describing images, tags and distribution results."""

from .base import (
    MAX_TAGS_PER_IMAGE,
    CopyFailure,
    DistributionReport,
    FolderNamePolicy,
    ImageLocation,
    ImageTag,
    TagAssignment,
    TagResult,
    location_key,
    normalize_location,
    parse_location,
)

__all__ = [
    "MAX_TAGS_PER_IMAGE",
    "CopyFailure",
    "DistributionReport",
    "FolderNamePolicy",
    "ImageLocation",
    "ImageTag",
    "TagAssignment",
    "TagResult",
    "location_key",
    "normalize_location",
    "parse_location",
]
