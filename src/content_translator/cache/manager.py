import json
import logging
import sqlite3

from content_translator.cache.base import TranslationCacheStore
from content_translator.cache.record import CacheRecord
from content_translator.cache.sqlite import TABLE_NAME, SQLiteCacheStore

logger = logging.getLogger(__name__)


class CacheManager:
    """Utility class for managing translation cache stores."""

    def __init__(self, store: TranslationCacheStore):
        self.store = store

    async def print_stats(self) -> None:
        """Print cache statistics."""
        stats = await self.store.get_stats()
        print("\nCache Statistics:")
        print("=" * 40)
        for key, value in stats.items():
            print(f"{key.replace('_', ' ').title()}: {value}")

    async def export_cache(self, export_path: str) -> int:
        """Export cached records to a JSON file (SQLite store only)."""
        if not isinstance(self.store, SQLiteCacheStore):
            logger.warning("Export only supported for SQLite cache")
            return 0

        with sqlite3.connect(self.store.db_path) as conn:
            cursor = conn.execute(
                f"""
                SELECT content_key, content_hash, target_locale, source_locale, translated, updated_at
                FROM {TABLE_NAME}
                ORDER BY content_key, target_locale
                """
            )
            rows = cursor.fetchall()

        export_data = [
            {
                "content_key": row[0],
                "content_hash": row[1],
                "target_locale": row[2],
                "source_locale": row[3],
                "translated_text": row[4],
                "updated_at": row[5],
            }
            for row in rows
        ]

        with open(export_path, "w", encoding="utf-8") as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2)

        logger.info("Cache exported to %s (%s records)", export_path, len(export_data))
        return len(export_data)

    async def import_cache(self, import_path: str) -> int:
        """Import records from a JSON export, overwriting matching rows."""
        with open(import_path, encoding="utf-8") as f:
            import_data = json.load(f)

        records = [CacheRecord.from_dict(entry) for entry in import_data]
        await self.store.upsert_many(records)

        logger.info("Cache imported from %s (%s records)", import_path, len(records))
        return len(records)
