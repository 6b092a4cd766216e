from .cache import BaseCacheStore, CacheStore, cache_key, get_cache_store
from .redis_client import RedisCacheStore

__all__ = [
    'BaseCacheStore',
    'CacheStore',
    'RedisCacheStore',
    'cache_key',
    'get_cache_store',
]
