"""
Binance Data Adapter

Primary source for candles and the only source for 24h tickers.
Public REST endpoints, no authentication.
"""

from datetime import datetime, timezone
from typing import Any

import aiohttp

from clon.schemas.market import Candle, Ticker


# Map user-facing timeframes to Binance interval strings
TIMEFRAME_MAP = {
    "5m": "5m",
    "15m": "15m",
    "1H": "1h",
    "4H": "4h",
    "1D": "1d",
}


def _ms_to_datetime(ms: Any) -> datetime:
    return datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)


def parse_klines(rows: list[list[Any]]) -> list[Candle]:
    """Binance kline rows (oldest first) to candles."""
    return [
        Candle(
            time=_ms_to_datetime(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
        )
        for row in rows
    ]


def parse_ticker(data: dict) -> Ticker:
    return Ticker(
        symbol=data["symbol"],
        price=float(data["lastPrice"]),
        change_24h=float(data["priceChangePercent"]),
        volume_24h=float(data["quoteVolume"]),
    )


async def fetch_binance_candles(
    session: aiohttp.ClientSession,
    base_url: str,
    symbol: str,
    timeframe: str = "1H",
    limit: int = 200,
    timeout: float = 8.0,
) -> list[Candle]:
    """Fetch OHLCV candles from Binance /klines."""
    interval = TIMEFRAME_MAP.get(timeframe, "1h")

    async with session.get(
        f"{base_url}/klines",
        params={"symbol": symbol, "interval": interval, "limit": limit},
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as resp:
        resp.raise_for_status()
        rows = await resp.json()

    return parse_klines(rows)


async def fetch_binance_ticker(
    session: aiohttp.ClientSession,
    base_url: str,
    symbol: str,
    timeout: float = 5.0,
) -> Ticker:
    """Fetch the 24h ticker from Binance."""
    async with session.get(
        f"{base_url}/ticker/24hr",
        params={"symbol": symbol},
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as resp:
        resp.raise_for_status()
        data = await resp.json()

    return parse_ticker(data)
