"""
CONTRACT 1: Market Data

Output of the market-data collaborator, input of the Analysis Engine.

Candles are already-fetched values: the engine never reaches the network.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class Timeframe(str, Enum):
    M5 = "5m"
    M15 = "15m"
    H1 = "1H"
    H4 = "4H"
    D1 = "1D"


class Candle(BaseModel):
    """Single OHLCV bar. Sequences are ordered oldest to newest."""

    time: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(..., ge=0)

    class Config:
        frozen = True


class Ticker(BaseModel):
    """24h ticker snapshot for a symbol."""

    symbol: str
    price: float = Field(..., gt=0)
    change_24h: float = Field(..., description="24h price change %")
    volume_24h: float = Field(..., ge=0, description="24h quote volume")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "symbol": "BTCUSDT",
                "price": 67250.5,
                "change_24h": 1.84,
                "volume_24h": 1523400000.0,
            }
        }
