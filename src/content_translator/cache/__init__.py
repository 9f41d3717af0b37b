from content_translator.cache.base import TranslationCacheStore
from content_translator.cache.factory import CacheFactory
from content_translator.cache.manager import CacheManager
from content_translator.cache.memory import MemoryCacheStore
from content_translator.cache.record import CacheKey, CacheRecord
from content_translator.cache.sqlite import SQLiteCacheStore

__all__ = [
    "CacheKey",
    "CacheRecord",
    "TranslationCacheStore",
    "MemoryCacheStore",
    "SQLiteCacheStore",
    "CacheFactory",
    "CacheManager",
]
