"""
Market Data Service

CONTRACT:
    Input:  CandleRequest (symbol, timeframe, limit)
    Output: list[Candle] (oldest to newest); fetch_ticker -> Ticker

RESPONSIBILITIES:
    - Fetch OHLCV candles from Binance, falling back to Bybit
    - Fetch 24h tickers from Binance
    - Normalize to Candle / Ticker schemas
    - Cache responses in Redis

No retries: failures surface as ExternalAPIError.
"""

from clon.services.market_data.interface import MarketDataServiceInterface, CandleRequest
from clon.services.market_data.service import MarketDataService, get_market_data_service

__all__ = [
    "MarketDataServiceInterface",
    "CandleRequest",
    "MarketDataService",
    "get_market_data_service",
]
