"""
Bybit Data Adapter

Secondary candle source, used when Binance fails.
Bybit returns klines newest first; they are reversed here.
"""

from datetime import datetime, timezone
from typing import Any

import aiohttp

from clon.schemas.market import Candle


INTERVAL_MAP = {
    "5m": "5",
    "15m": "15",
    "1H": "60",
    "4H": "240",
    "1D": "D",
}


class BybitError(Exception):
    """Bybit answered with a non-zero retCode."""
    pass


def parse_kline_list(payload: dict) -> list[Candle]:
    """Bybit v5 kline payload to candles, oldest first."""
    if payload.get("retCode") != 0:
        raise BybitError(f"Bybit error: {payload.get('retMsg')}")

    rows: list[list[Any]] = payload["result"]["list"]
    return [
        Candle(
            time=datetime.fromtimestamp(int(row[0]) / 1000, tz=timezone.utc),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
        )
        for row in reversed(rows)
    ]


async def fetch_bybit_candles(
    session: aiohttp.ClientSession,
    base_url: str,
    symbol: str,
    timeframe: str = "1H",
    limit: int = 200,
    timeout: float = 8.0,
) -> list[Candle]:
    """Fetch linear-perpetual klines from Bybit."""
    interval = INTERVAL_MAP.get(timeframe, "60")

    async with session.get(
        f"{base_url}/kline",
        params={"category": "linear", "symbol": symbol, "interval": interval, "limit": limit},
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as resp:
        resp.raise_for_status()
        payload = await resp.json()

    return parse_kline_list(payload)
