"""
Redis cache for the latest signal per symbol.

Written by the runtime after each evaluation, read by the HTTP API.
Falls back to an in-process dict when Redis is unreachable.
"""

import logging
import time
from typing import Optional

import redis.asyncio as redis

from perpsignal.core.config import settings
from perpsignal.schemas.signal import SignalOutput

logger = logging.getLogger(__name__)

# Shared client, set by init_redis() during app startup
_redis_pool: Optional[redis.Redis] = None


async def init_redis(url: Optional[str] = None) -> Optional[redis.Redis]:
    """Connect the shared client once; None means signals stay in process memory."""
    global _redis_pool
    if _redis_pool is not None:
        return _redis_pool

    url = url or settings.redis_url
    client = redis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        await client.ping()
    except Exception as e:
        logger.warning(f"Redis unreachable at {url} ({e}); signal cache falls back to memory")
        await client.aclose()
        return None

    _redis_pool = client
    logger.info(f"Signal cache using Redis at {url}")
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool is None:
        return
    await _redis_pool.aclose()
    _redis_pool = None
    logger.info("Signal cache Redis client closed")


class SignalCache:
    """
    Latest SignalOutput per symbol.

    Keys:
    - signal:{SYMBOL} -> SignalOutput JSON, expires after ttl seconds
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, ttl: Optional[int] = None):
        self._redis = redis_client
        self.ttl = ttl if ttl is not None else settings.signal_cache_ttl_seconds
        # key -> (json, expires_at monotonic)
        self._memory_cache: dict[str, tuple[str, float]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    @staticmethod
    def key(symbol: str) -> str:
        return f"signal:{symbol.upper()}"

    def _memory_get(self, key: str) -> Optional[str]:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: str, ex: int) -> None:
        self._memory_cache[key] = (value, time.monotonic() + ex)

    async def set_signal(self, signal: SignalOutput) -> bool:
        """Store the latest signal for its symbol."""
        key = self.key(signal.symbol)
        value = signal.model_dump_json()

        if self.redis:
            try:
                await self.redis.set(key, value, ex=self.ttl)
                self._memory_cache.pop(key, None)
                return True
            except Exception as e:
                logger.debug(f"Redis set_signal failed: {e}")

        self._memory_set(key, value, self.ttl)
        return True

    async def get_signal(self, symbol: str) -> Optional[SignalOutput]:
        """Latest cached signal, None if missing or expired."""
        key = self.key(symbol)
        value = None

        if self.redis:
            try:
                value = await self.redis.get(key)
            except Exception as e:
                logger.debug(f"Redis get_signal failed: {e}")

        # A failed Redis write leaves the latest value only in memory
        if value is None:
            value = self._memory_get(key)

        return SignalOutput.model_validate_json(value) if value else None

    async def delete_signal(self, symbol: str) -> None:
        key = self.key(symbol)
        if self.redis:
            try:
                await self.redis.delete(key)
            except Exception as e:
                logger.debug(f"Redis delete_signal failed: {e}")
        self._memory_cache.pop(key, None)


# Singleton instance
_signal_cache: Optional[SignalCache] = None


def get_signal_cache() -> SignalCache:
    """Get the signal cache singleton."""
    global _signal_cache
    if _signal_cache is None:
        _signal_cache = SignalCache()
    return _signal_cache
