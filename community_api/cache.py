"""
Redis cache module

Async Redis connection management and the read-through cache used by the
catalog service
"""

import hashlib
import json
from typing import Any, Awaitable, Callable, Optional, Dict
import redis.asyncio as redis_async
from loguru import logger

from community_api.config.settings import settings


# ==================== Redis connection management ====================

_redis_client: Optional[redis_async.Redis] = None


async def init_redis() -> redis_async.Redis:
    """
    Initialise the async Redis connection (singleton)

    Returns:
        Async Redis client
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    client = redis_async.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        password=settings.REDIS_PASSWORD,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        decode_responses=True
    )

    # Connection check
    try:
        await client.ping()
        logger.info("Async Redis connection established")
    except Exception as e:
        logger.error(f"Async Redis connection failed: {e}")
        await client.close()
        raise

    _redis_client = client
    return _redis_client


def get_redis_client() -> Optional[redis_async.Redis]:
    """
    Current async Redis client

    Returns:
        Redis client, None when not initialised
    """
    return _redis_client


def set_redis_client(client: Optional[Any]):
    """Install a client instance (used by tests and alternative bootstraps)"""
    global _redis_client
    _redis_client = client


async def close_redis():
    """Close the Redis connection"""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        logger.info("Async Redis connection closed")
        _redis_client = None


# ==================== Redis key builder ====================

class RedisKeys:
    """Unified Redis key builder"""

    @staticmethod
    def catalog(endpoint: str, params_hash: str) -> str:
        """Catalog response cache key"""
        return f"catalog:{endpoint}:{params_hash}"

    @staticmethod
    def igdb_access_token() -> str:
        """Twitch app access token used for IGDB"""
        return "igdb:access_token"

    @staticmethod
    def rate_limit(client_id: str, window: int) -> str:
        """Fixed window request counter"""
        return f"ratelimit:{client_id}:{window}"


def hash_params(params: Dict[str, Any]) -> str:
    """
    Deterministic hash of call parameters

    None values are dropped so that omitted and explicit-None arguments share a key
    """
    cache_params = {k: v for k, v in params.items() if v is not None}
    params_str = json.dumps(cache_params, sort_keys=True, ensure_ascii=False)
    return hashlib.md5(params_str.encode()).hexdigest()


# ==================== Cache ====================

class Cache:
    """Async JSON cache on top of Redis, every failure degrades to a miss"""

    def __init__(self, redis_client: Optional[redis_async.Redis] = None):
        """
        Args:
            redis_client: Redis client, defaults to the global client at call time
        """
        self._redis = redis_client

    @property
    def redis(self) -> Optional[redis_async.Redis]:
        return self._redis if self._redis is not None else get_redis_client()

    @staticmethod
    def _serialize(value: Any) -> str:
        """Strings are stored as-is, anything else must be JSON serializable"""
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

    @staticmethod
    def _deserialize(value: str) -> Any:
        try:
            return json.loads(value)
        except (json.JSONDecodeError, ValueError):
            return value

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Read a cached value

        Args:
            key: cache key
            default: returned on miss or when Redis is unavailable

        Returns:
            Deserialized value
        """
        if self.redis is None:
            return default

        try:
            value = await self.redis.get(key)
        except Exception as e:
            logger.warning(f"⚠️ Cache read failed for {key}: {e}")
            return default

        if value is None:
            return default
        return self._deserialize(value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None):
        """
        Store a value

        Args:
            key: cache key
            value: value (serialized automatically)
            ttl: expiry in seconds, None never expires
        """
        if self.redis is None:
            return

        serialized = self._serialize(value)
        try:
            if ttl:
                await self.redis.setex(key, ttl, serialized)
            else:
                await self.redis.set(key, serialized)
        except Exception as e:
            logger.warning(f"⚠️ Cache write failed for {key}: {e}")

    async def delete(self, key: str) -> bool:
        """
        Delete a key

        Returns:
            True if at least one key was removed
        """
        if self.redis is None:
            return False

        try:
            result = await self.redis.delete(key)
        except Exception as e:
            logger.warning(f"⚠️ Cache delete failed for {key}: {e}")
            return False
        return result > 0

    async def get_or_set(
        self,
        key: str,
        default_factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None
    ) -> Any:
        """
        Read-through lookup

        On a miss default_factory is awaited and a non-None result is stored.
        Concurrent misses on the same key each call the factory.

        Args:
            key: cache key
            default_factory: coroutine function producing the value
            ttl: expiry in seconds

        Returns:
            Cached or freshly produced value
        """
        value = await self.get(key)
        if value is not None:
            logger.debug(f"Cache hit: {key}")
            return value

        logger.debug(f"Cache miss: {key}")
        value = await default_factory()

        if value is not None:
            await self.set(key, value, ttl)

        return value
