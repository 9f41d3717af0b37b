import logging
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Sequence

from content_translator.cache.base import TranslationCacheStore
from content_translator.cache.record import CacheKey, CacheRecord, utc_now

logger = logging.getLogger(__name__)

TABLE_NAME = "content_translations"


class SQLiteCacheStore(TranslationCacheStore):
    """SQLite-based persistent translation cache store."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.hits = 0
        self.misses = 0
        self._init_db()

    def _init_db(self) -> None:
        """Initialize SQLite database."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                    content_key TEXT NOT NULL,
                    content_hash TEXT NOT NULL,
                    target_locale TEXT NOT NULL,
                    source_locale TEXT,
                    translated TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE (content_key, content_hash, target_locale)
                )
                """
            )
            conn.execute(
                f"""
                CREATE INDEX IF NOT EXISTS idx_{TABLE_NAME}_updated_at ON {TABLE_NAME}(updated_at)
                """
            )
            conn.commit()
        logger.info("SQLite cache initialized: %s", self.db_path)

    async def lookup_many(
        self,
        keys: Sequence[CacheKey],
        target_locale: str,
    ) -> dict[CacheKey, CacheRecord]:
        if not keys:
            return {}

        # OR-ed ANDs exceed SQLite's expression depth limit past a few hundred keys.
        values = ", ".join("(?, ?)" for _ in keys)
        params: list[str] = [target_locale]
        for key in keys:
            params.extend((key.content_key, key.content_hash))

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"""
                SELECT content_key, content_hash, target_locale, source_locale, translated, updated_at
                FROM {TABLE_NAME}
                WHERE target_locale = ? AND (content_key, content_hash) IN (VALUES {values})
                """,
                params,
            )
            rows = cursor.fetchall()

        found: dict[CacheKey, CacheRecord] = {}
        for content_key, content_hash, locale, source_locale, translated, updated_at in rows:
            record = CacheRecord(
                content_key=content_key,
                content_hash=content_hash,
                target_locale=locale,
                translated_text=translated,
                source_locale=source_locale,
                updated_at=datetime.fromisoformat(updated_at),
            )
            found[record.key] = record

        self.hits += len(found)
        self.misses += len(set(keys)) - len(found)
        logger.debug("SQLite cache lookup: %s/%s hits", len(found), len(keys))
        return found

    async def upsert_many(self, records: Sequence[CacheRecord]) -> None:
        if not records:
            return

        timestamp = utc_now().isoformat()
        placeholders = ", ".join("(?, ?, ?, ?, ?, ?, ?)" for _ in records)
        params: list[Any] = []
        for record in records:
            params.extend(
                (
                    record.content_key,
                    record.content_hash,
                    record.target_locale,
                    record.source_locale,
                    record.translated_text,
                    timestamp,
                    timestamp,
                )
            )

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"""
                INSERT INTO {TABLE_NAME}
                (content_key, content_hash, target_locale, source_locale, translated, created_at, updated_at)
                VALUES {placeholders}
                ON CONFLICT (content_key, content_hash, target_locale) DO UPDATE SET
                    translated = excluded.translated,
                    source_locale = excluded.source_locale,
                    updated_at = excluded.updated_at
                """,
                params,
            )
            conn.commit()

        logger.debug("SQLite cache upserted %s records", len(records))

    async def clear(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(f"DELETE FROM {TABLE_NAME}")
            conn.commit()

        self.hits = 0
        self.misses = 0
        logger.info("SQLite cache cleared")

    async def purge_older_than(self, hours: float) -> int:
        cutoff_time = (utc_now() - timedelta(hours=hours)).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"DELETE FROM {TABLE_NAME} WHERE updated_at < ?",
                (cutoff_time,),
            )
            purged_count = cursor.rowcount
            conn.commit()

        logger.info("Purged %s stale cache records", purged_count)
        return purged_count

    async def get_stats(self) -> Dict[str, Any]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}")
            total_entries = cursor.fetchone()[0]

            cursor = conn.execute(
                f"""
                SELECT target_locale, COUNT(*) FROM {TABLE_NAME}
                GROUP BY target_locale
                """
            )
            by_locale = dict(cursor.fetchall())

        total_requests = self.hits + self.misses
        hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "type": "sqlite",
            "db_path": self.db_path,
            "total_entries": total_entries,
            "by_locale": by_locale,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": f"{hit_rate:.2f}%",
            "total_requests": total_requests,
        }
