import sys
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from content_translator.cache import MemoryCacheStore, SQLiteCacheStore  # noqa: E402
from content_translator.providers import ProviderTranslation  # noqa: E402


# Test fixtures and utilities


class RecordingProvider:
    """Mock provider that prefixes each text with ``[<locale>]`` and records calls."""

    def __init__(self, detected: str = "en"):
        self.detected = detected
        self.calls = []

    async def translate(self, texts, target_locale, tag_handling="html"):
        self.calls.append((list(texts), target_locale, tag_handling))
        return [
            ProviderTranslation(text=f"[{target_locale}] {text}", detected_source_lang=self.detected)
            for text in texts
        ]


class FailingProvider:
    """Mock provider that always fails."""

    def __init__(self):
        self.calls = 0

    async def translate(self, texts, target_locale, tag_handling="html"):
        self.calls += 1
        raise RuntimeError("boom")


class ShortProvider(RecordingProvider):
    """Mock provider that returns fewer items than requested."""

    async def translate(self, texts, target_locale, tag_handling="html"):
        results = await super().translate(texts, target_locale, tag_handling)
        return results[:-1]


class LongProvider(RecordingProvider):
    """Mock provider that returns extra items."""

    async def translate(self, texts, target_locale, tag_handling="html"):
        results = await super().translate(texts, target_locale, tag_handling)
        return results + [ProviderTranslation(text="extra", detected_source_lang="en")]


class CountingStore(MemoryCacheStore):
    """Memory store that records how often it is read and written."""

    def __init__(self):
        super().__init__()
        self.lookup_calls = []
        self.upsert_calls = []

    async def lookup_many(self, keys, target_locale):
        self.lookup_calls.append((list(keys), target_locale))
        return await super().lookup_many(keys, target_locale)

    async def upsert_many(self, records):
        self.upsert_calls.append(list(records))
        await super().upsert_many(records)


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def counting_store():
    return CountingStore()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    """Each cache store implementation in turn."""
    if request.param == "memory":
        return MemoryCacheStore()
    return SQLiteCacheStore(db_path=str(tmp_path / "cache.db"))


async def seed_translation(
    store,
    content_key: str,
    source_text: str,
    translated_text: str,
    target_locale: str,
    source_locale: str = "EN",
) -> None:
    """Pre-populate ``store`` as if ``source_text`` had been translated before."""
    from content_translator.cache import CacheRecord
    from content_translator.hashing import hash_content

    await store.upsert_many(
        [
            CacheRecord(
                content_key=content_key,
                content_hash=hash_content(source_text),
                target_locale=target_locale,
                translated_text=translated_text,
                source_locale=source_locale,
            )
        ]
    )
