"""
Cache module for Clon.

Provides Redis caching for fetched market data.
"""

from clon.services.cache.redis_client import (
    MarketCache,
    get_market_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "MarketCache",
    "get_market_cache",
    "init_redis",
    "close_redis",
]
