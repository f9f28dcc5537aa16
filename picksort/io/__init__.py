"""I/O helpers for persisted state, vocabularies and thumbnails."""

from .key_value import KeyValueStore
from .vocabulary import VocabularyError, load_vocabulary

__all__ = ["KeyValueStore", "VocabularyError", "load_vocabulary"]
