"""Utility helpers for the PickSort application."""

from .paths import IMAGE_EXTENSIONS, RAW_EXTENSIONS, allowed_extensions, is_image_file, list_image_files
from .text import filter_candidates, resolve_choice, tag_folder_name

__all__ = [
    "IMAGE_EXTENSIONS",
    "RAW_EXTENSIONS",
    "allowed_extensions",
    "filter_candidates",
    "is_image_file",
    "list_image_files",
    "resolve_choice",
    "tag_folder_name",
]
