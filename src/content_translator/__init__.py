"""Batch content translation with a cache-through translation store."""

from content_translator.batch import (
    MissingTranslationError,
    ProviderResponseError,
    TranslatableEntry,
    TranslationResult,
    translate_batch,
)
from content_translator.hashing import hash_content

__all__ = [
    "MissingTranslationError",
    "ProviderResponseError",
    "TranslatableEntry",
    "TranslationResult",
    "hash_content",
    "translate_batch",
]
