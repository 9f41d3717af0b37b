from content_translator.cache.base import TranslationCacheStore
from content_translator.cache.memory import MemoryCacheStore
from content_translator.cache.sqlite import SQLiteCacheStore
from content_translator.config import ConfigurationError


class CacheFactory:
    """Factory for creating translation cache stores."""

    @staticmethod
    def create_store(cache_type: str, **kwargs) -> TranslationCacheStore:
        """Create a cache store instance based on type."""
        if cache_type == "memory":
            return MemoryCacheStore()
        if cache_type == "sqlite":
            db_path = kwargs.get("db_path")
            if not db_path:
                raise ConfigurationError("db_path is required for sqlite cache")
            return SQLiteCacheStore(db_path=db_path)
        raise ConfigurationError(f"Unknown cache type: {cache_type}")
