import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache

from ..config import Config

logger = logging.getLogger(__name__)


def cache_key(source: str, *parts: str) -> str:
    """Build a source-namespaced key, e.g. cache_key('search', 'usdc') -> 'search:usdc'."""
    return ":".join([source, *parts])


class BaseCacheStore:
    """
    Shared key/value store for the source adapters.

    Subclasses provide has/get/set. None is never stored: a loader that
    returns None reports absence and is retried on the next request.
    """

    def __init__(self):
        self._inflight_lock = threading.Lock()
        self._inflight: Dict[str, Future] = {}

    def has(self, key: str) -> bool:
        raise NotImplementedError

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], Optional[Any]],
        cache_if: Optional[Callable[[Any], bool]] = None,
    ) -> Optional[Any]:
        """
        Return the cached value for key, or run loader() once for it.

        A loaded value is stored unless it is None or cache_if(value) is false;
        either way it is still handed to every waiting caller.

        Concurrent callers asking for the same missing key wait for the
        first caller's result instead of issuing their own upstream call.
        No cache lock is held while loader() runs.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"Cache hit: {key}")
            return value

        with self._inflight_lock:
            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            logger.debug(f"Waiting on in-flight load: {key}")
            return future.result()

        try:
            value = self.get(key)
            if value is None:
                logger.debug(f"Cache miss: {key}")
                value = loader()
                if value is not None and (cache_if is None or cache_if(value)):
                    self.set(key, value)
            future.set_result(value)
            return value
        except BaseException as e:
            future.set_exception(e)
            raise
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)


class CacheStore(BaseCacheStore):
    """
    In-process LRU cache with a per-entry time-to-live.

    Backed by cachetools.TTLCache, which is not thread-safe on its own;
    every access goes through one lock.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self.max_entries = int(max_entries if max_entries is not None else Config.CACHE_MAX_ENTRIES)
        self.ttl_seconds = float(ttl_seconds if ttl_seconds is not None else Config.CACHE_TTL_SECONDS)
        self._cache = TTLCache(maxsize=self.max_entries, ttl=self.ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)


_cache_store = None


def get_cache_store() -> BaseCacheStore:
    """
    Get or create the process-wide cache store for Config.CACHE_BACKEND.

    Returns:
        CacheStore, or RedisCacheStore when CACHE_BACKEND=redis
    """
    global _cache_store
    if _cache_store is None:
        if Config.CACHE_BACKEND == 'redis':
            from .redis_client import RedisCacheStore
            _cache_store = RedisCacheStore()
        else:
            _cache_store = CacheStore()
            logger.info(
                f"In-memory cache: max {_cache_store.max_entries:,} entries, ttl {_cache_store.ttl_seconds:.0f}s"
            )
    return _cache_store
