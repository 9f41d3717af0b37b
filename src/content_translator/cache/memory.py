import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any, Dict, Sequence

from content_translator.cache.base import TranslationCacheStore
from content_translator.cache.record import CacheKey, CacheRecord, utc_now

logger = logging.getLogger(__name__)

_StoreKey = tuple[str, str, str]


class MemoryCacheStore(TranslationCacheStore):
    """In-memory translation cache store using a dictionary."""

    def __init__(self) -> None:
        self.records: Dict[_StoreKey, CacheRecord] = {}
        self.hits = 0
        self.misses = 0

    async def lookup_many(
        self,
        keys: Sequence[CacheKey],
        target_locale: str,
    ) -> dict[CacheKey, CacheRecord]:
        found: dict[CacheKey, CacheRecord] = {}
        for key in keys:
            record = self.records.get((key.content_key, key.content_hash, target_locale))
            if record is not None:
                found[key] = record

        self.hits += len(found)
        self.misses += len(set(keys)) - len(found)
        logger.debug("Memory cache lookup: %s/%s hits", len(found), len(keys))
        return found

    async def upsert_many(self, records: Sequence[CacheRecord]) -> None:
        if not records:
            return

        now = utc_now()
        for record in records:
            self.records[(record.content_key, record.content_hash, record.target_locale)] = replace(
                record, updated_at=now
            )
        logger.debug("Memory cache upserted %s records", len(records))

    async def clear(self) -> None:
        self.records.clear()
        self.hits = 0
        self.misses = 0
        logger.info("Memory cache cleared")

    async def purge_older_than(self, hours: float) -> int:
        cutoff = utc_now() - timedelta(hours=hours)
        stale = [key for key, record in self.records.items() if record.updated_at < cutoff]
        for key in stale:
            del self.records[key]

        logger.info("Purged %s stale memory cache records", len(stale))
        return len(stale)

    async def get_stats(self) -> Dict[str, Any]:
        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "type": "memory",
            "size": len(self.records),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": f"{hit_rate:.2f}%",
            "total_requests": total_requests,
        }
