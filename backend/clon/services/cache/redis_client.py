"""
Redis cache client for fetched market data.

Short-lived cache of tickers and candle windows so that a burst of
requests for the same symbol (mention replies, analysis calls, the
watchlist run) hits the exchanges once.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import redis.asyncio as redis

from clon.core.config import settings
from clon.schemas.market import Candle, Ticker

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.close()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


class MarketCache:
    """
    Redis-based cache for market data.

    Keys:
    - ticker:{symbol} → JSON Ticker
    - candles:{symbol}:{timeframe}:{limit} → JSON list of candles

    Falls back to a per-instance in-memory store (TTL honoured) when Redis
    is unavailable.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self._redis = redis_client
        self._memory_cache: Dict[str, Tuple[float, str]] = {}

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    def _memory_get(self, key: str) -> Optional[str]:
        """Fallback to memory cache."""
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: str, ex: int):
        """Fallback to memory cache."""
        self._memory_cache[key] = (time.monotonic() + ex, value)

    async def _get(self, key: str) -> Optional[str]:
        if self.redis:
            try:
                return await self.redis.get(key)
            except Exception as e:
                logger.debug(f"Redis get failed for {key}: {e}")

        return self._memory_get(key)

    async def _set(self, key: str, value: str, ex: int) -> None:
        if self.redis:
            try:
                await self.redis.set(key, value, ex=ex)
                return
            except Exception as e:
                logger.debug(f"Redis set failed for {key}: {e}")

        self._memory_set(key, value, ex)

    # ============ Ticker ============

    async def set_ticker(self, ticker: Ticker, ttl: Optional[int] = None) -> None:
        key = f"ticker:{ticker.symbol.upper()}"
        await self._set(key, ticker.model_dump_json(), ttl or settings.ticker_cache_ttl)

    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        value = await self._get(f"ticker:{symbol.upper()}")
        return Ticker.model_validate_json(value) if value else None

    # ============ Candles ============

    async def set_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int,
        candles: List[Candle],
        ttl: Optional[int] = None,
    ) -> None:
        key = f"candles:{symbol.upper()}:{timeframe}:{limit}"
        value = json.dumps([c.model_dump(mode="json") for c in candles])
        await self._set(key, value, ttl or settings.candle_cache_ttl)

    async def get_candles(self, symbol: str, timeframe: str, limit: int) -> Optional[List[Candle]]:
        value = await self._get(f"candles:{symbol.upper()}:{timeframe}:{limit}")
        if not value:
            return None
        raw: List[Dict[str, Any]] = json.loads(value)
        return [Candle.model_validate(c) for c in raw]


# Singleton instance
_market_cache: Optional[MarketCache] = None


def get_market_cache() -> MarketCache:
    """Get the market cache singleton."""
    global _market_cache
    if _market_cache is None:
        _market_cache = MarketCache()
    return _market_cache
