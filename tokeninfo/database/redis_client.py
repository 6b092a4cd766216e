import json
import logging
from typing import Any, Optional

import redis

from ..config import Config
from ..errors import CacheConnectionError
from .cache import BaseCacheStore

logger = logging.getLogger(__name__)


class RedisCacheStore(BaseCacheStore):
    """
    Cache store shared between processes through Redis.

    Entries expire with SETEX after CACHE_TTL_SECONDS. Capacity eviction is
    left to the server (run it with maxmemory-policy allkeys-lru).
    A Redis error during a lookup is treated as a miss.
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl_seconds: Optional[int] = None):
        super().__init__()
        self.ttl_seconds = int(ttl_seconds if ttl_seconds is not None else Config.CACHE_TTL_SECONDS)
        self.prefix = Config.REDIS_KEY_PREFIX

        if client is not None:
            self.client = client
            return

        logger.info(f"Connecting to Redis cache: {Config.REDIS_HOST}:{Config.REDIS_PORT}/{Config.REDIS_DB}")
        try:
            self.client = redis.Redis(
                host=Config.REDIS_HOST,
                port=Config.REDIS_PORT,
                db=Config.REDIS_DB,
                password=Config.REDIS_PASSWORD,
                decode_responses=True,
                socket_timeout=5.0
            )
            self.client.ping()
            logger.info(f"Connected to Redis at {Config.REDIS_HOST}:{Config.REDIS_PORT}/{Config.REDIS_DB}")
        except redis.ConnectionError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise CacheConnectionError(f"Failed to connect to Redis at {Config.REDIS_HOST}:{Config.REDIS_PORT}: {e}") from e

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def has(self, key: str) -> bool:
        try:
            return bool(self.client.exists(self._key(key)))
        except redis.RedisError as e:
            logger.warning(f"Redis EXISTS failed for {key}: {e}")
            return False

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis GET failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    def set(self, key: str, value: Any) -> None:
        try:
            self.client.setex(self._key(key), self.ttl_seconds, json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Redis SETEX failed for {key}: {e}")
