"""Batch translation with cache-through semantics.

``translate_batch`` hashes every entry, serves what it can from the cache
store in one lookup, sends the remaining texts to the provider in one call,
writes the fresh translations back in one upsert and returns results in the
caller's order.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from content_translator.cache import CacheKey, CacheRecord, TranslationCacheStore
from content_translator.hashing import hash_content
from content_translator.providers import ProviderTranslation, TranslationProvider

logger = logging.getLogger(__name__)

UNKNOWN_LOCALE = "UNKNOWN"


class ProviderResponseError(Exception):
    """The provider returned a response that cannot be aligned with the request."""


class MissingTranslationError(Exception):
    """An entry resolved to neither a cache hit nor a fresh translation."""


@dataclass(frozen=True)
class TranslatableEntry:
    # e.g. "proposal:abc123:title"
    content_key: str
    text: str


@dataclass(frozen=True)
class TranslationResult:
    content_key: str
    translated_text: str
    source_locale: str
    cached: bool


@dataclass(frozen=True)
class _HashedEntry:
    entry: TranslatableEntry
    key: CacheKey


async def translate_batch(
    entries: Sequence[TranslatableEntry],
    target_locale: str,
    provider: TranslationProvider,
    store: TranslationCacheStore,
) -> list[TranslationResult]:
    """Translate ``entries`` into ``target_locale``, reusing cached translations.

    The store is read once and written at most once; the provider is called
    at most once, with the cache misses in input order.
    """
    if not entries:
        return []

    hashed = [
        _HashedEntry(entry=entry, key=CacheKey(entry.content_key, hash_content(entry.text)))
        for entry in entries
    ]

    cache_hits = await store.lookup_many([item.key for item in hashed], target_locale)
    misses = [item for item in hashed if item.key not in cache_hits]

    fresh: dict[CacheKey, CacheRecord] = {}
    if misses:
        fresh = await _translate_misses(misses, target_locale, provider)
        await store.upsert_many(list(fresh.values()))

    logger.info(
        "event=batch_translated target_locale=%s entries=%s cache_hits=%s cache_misses=%s",
        target_locale,
        len(entries),
        len(hashed) - len(misses),
        len(misses),
    )
    return _merge_results(hashed, cache_hits, fresh)


async def _translate_misses(
    misses: list[_HashedEntry],
    target_locale: str,
    provider: TranslationProvider,
) -> dict[CacheKey, CacheRecord]:
    texts = [item.entry.text for item in misses]
    translations = await provider.translate(texts, target_locale, tag_handling="html")
    _check_alignment(translations, len(misses))

    fresh: dict[CacheKey, CacheRecord] = {}
    for item, translation in zip(misses, translations):
        fresh[item.key] = CacheRecord(
            content_key=item.key.content_key,
            content_hash=item.key.content_hash,
            target_locale=target_locale,
            translated_text=translation.text,
            source_locale=translation.detected_source_lang.upper(),
        )
    return fresh


def _check_alignment(translations: Sequence[ProviderTranslation], expected: int) -> None:
    if len(translations) > expected:
        raise ProviderResponseError(
            f"Provider returned {len(translations)} results for {expected} texts: "
            f"index {expected} out of bounds."
        )
    if len(translations) < expected:
        raise ProviderResponseError(
            f"Provider returned {len(translations)} results for {expected} texts: "
            f"missing result at index {len(translations)}."
        )


def _merge_results(
    hashed: list[_HashedEntry],
    cache_hits: dict[CacheKey, CacheRecord],
    fresh: dict[CacheKey, CacheRecord],
) -> list[TranslationResult]:
    results: list[TranslationResult] = []
    for item in hashed:
        if item.key in cache_hits:
            record, cached = cache_hits[item.key], True
        elif item.key in fresh:
            record, cached = fresh[item.key], False
        else:
            raise MissingTranslationError(
                f"Translation result missing for key '{item.entry.content_key}'"
            )

        source_locale = record.source_locale
        if source_locale is None:
            source_locale = UNKNOWN_LOCALE
        results.append(
            TranslationResult(
                content_key=item.entry.content_key,
                translated_text=record.translated_text,
                source_locale=source_locale,
                cached=cached,
            )
        )
    return results
