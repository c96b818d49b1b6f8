"""
Market Data Service Implementation

Binance first, Bybit as candle fallback. Responses are cached briefly.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from clon.core.config import Settings, settings as default_settings
from clon.schemas.market import Candle, Ticker
from clon.services.base import ExternalAPIError
from clon.services.cache.redis_client import MarketCache, get_market_cache
from clon.services.market_data.interface import MarketDataServiceInterface
from clon.services.market_data.binance_adapter import fetch_binance_candles, fetch_binance_ticker
from clon.services.market_data.bybit_adapter import BybitError, fetch_bybit_candles

logger = logging.getLogger(__name__)


class MarketDataService(MarketDataServiceInterface):
    """Fetches candles and tickers from public exchange REST APIs."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[MarketCache] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or default_settings
        self.cache = cache or get_market_cache()
        self._session = session

    @property
    def name(self) -> str:
        return "MarketDataService"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_candles(self, symbol: str, timeframe: str = "1H", limit: int = 300) -> list[Candle]:
        symbol = symbol.upper()
        cached = await self.cache.get_candles(symbol, timeframe, limit)
        if cached:
            return cached

        session = await self._ensure_session()
        timeout = self.settings.candle_timeout_seconds

        try:
            candles = await fetch_binance_candles(
                session, self.settings.binance_base_url, symbol, timeframe, limit, timeout
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, KeyError) as e:
            logger.warning(f"Binance failed for {symbol}, trying Bybit... {e}")
            try:
                candles = await fetch_bybit_candles(
                    session, self.settings.bybit_base_url, symbol, timeframe, limit, timeout
                )
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, KeyError, BybitError) as fallback_error:
                raise ExternalAPIError(
                    self.name,
                    f"Candle fetch failed for {symbol}: {fallback_error}",
                    {"symbol": symbol, "timeframe": timeframe, "primary_error": str(e)},
                ) from fallback_error

        await self.cache.set_candles(symbol, timeframe, limit, candles)
        return candles

    async def fetch_ticker(self, symbol: str) -> Ticker:
        symbol = symbol.upper()
        cached = await self.cache.get_ticker(symbol)
        if cached:
            return cached

        session = await self._ensure_session()
        try:
            ticker = await fetch_binance_ticker(
                session,
                self.settings.binance_base_url,
                symbol,
                self.settings.ticker_timeout_seconds,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, KeyError) as e:
            logger.error(f"Ticker fetch failed for {symbol}: {e}")
            raise ExternalAPIError(
                self.name, f"Ticker fetch failed for {symbol}: {e}", {"symbol": symbol}
            ) from e

        await self.cache.set_ticker(ticker)
        return ticker

    async def health_check(self) -> bool:
        try:
            await self.fetch_ticker("BTCUSDT")
            return True
        except ExternalAPIError:
            return False


# Singleton instance
_service_instance: Optional[MarketDataService] = None


def get_market_data_service() -> MarketDataService:
    """Get or create market data service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = MarketDataService()
    return _service_instance
