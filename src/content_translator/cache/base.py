from abc import ABC, abstractmethod
from typing import Any, Sequence

from content_translator.cache.record import CacheKey, CacheRecord


class TranslationCacheStore(ABC):
    """Abstract base class for translation cache stores.

    Records are identified by ``(content_key, content_hash, target_locale)``.
    Stores never delete records on their own; a changed text produces a new
    hash and therefore a new record.
    """

    @abstractmethod
    async def lookup_many(
        self,
        keys: Sequence[CacheKey],
        target_locale: str,
    ) -> dict[CacheKey, CacheRecord]:
        """Fetch every cached record matching ``keys`` in one round trip."""
        raise NotImplementedError

    @abstractmethod
    async def upsert_many(self, records: Sequence[CacheRecord]) -> None:
        """Insert records, overwriting text and source locale on conflict."""
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cache entries."""
        raise NotImplementedError

    @abstractmethod
    async def purge_older_than(self, hours: float) -> int:
        """Delete records not written within ``hours`` and return the count."""
        raise NotImplementedError

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        raise NotImplementedError
