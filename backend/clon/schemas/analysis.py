"""
CONTRACT 2: Analysis Engine

Input: Candle sequence (>= 200 bars) + timeframe
Output: AnalysisReport

Pure Python/NumPy - deterministic, no hidden state.
Every numeric field is rounded to 2 decimals at the point it is exposed.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Bias(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral / Wait"


class RSISignal(str, Enum):
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class MACDCrossover(str, Enum):
    BULLISH_CROSSOVER = "bullish_crossover"
    BEARISH_CROSSOVER = "bearish_crossover"
    BULLISH = "bullish"
    BEARISH = "bearish"


class VolumeSignal(str, Enum):
    HIGH = "high"
    LOW = "low"
    AVERAGE = "average"


class TrendStructure(str, Enum):
    UPTREND = "uptrend (HH + HL)"
    DOWNTREND = "downtrend (LH + LL)"
    VOLATILE = "volatile / expanding"
    RANGING = "ranging / consolidation"


class LevelType(str, Enum):
    SUPPORT = "support"
    RESISTANCE = "resistance"


# =============================================================================
# INDICATORS
# =============================================================================


class EMAValues(BaseModel):
    """Latest EMA values over closes."""

    ema9: float
    ema21: float
    ema50: float
    ema200: float

    class Config:
        frozen = True


class RSIData(BaseModel):
    """RSI(14) value and zone."""

    value: float = Field(..., ge=0, le=100)
    signal: RSISignal

    class Config:
        frozen = True


class MACDData(BaseModel):
    """MACD(12, 26, 9) values."""

    macd: float
    signal: float
    histogram: float
    crossover: MACDCrossover

    class Config:
        frozen = True


class VolumeData(BaseModel):
    """Latest volume vs trailing 20-bar average."""

    current: float = Field(..., ge=0)
    avg20: float = Field(..., ge=0)
    ratio: float = Field(..., ge=0, description="Current/Avg ratio")
    signal: VolumeSignal

    class Config:
        frozen = True


class IndicatorSet(BaseModel):
    ema: EMAValues
    rsi: RSIData
    macd: MACDData
    volume: VolumeData

    class Config:
        frozen = True


# =============================================================================
# STRUCTURE
# =============================================================================


class PriceLevel(BaseModel):
    """Pivot-detected support/resistance level."""

    type: LevelType
    price: float

    class Config:
        frozen = True


class SupportResistance(BaseModel):
    nearest_support: Optional[float] = Field(
        default=None, description="Highest support below current price"
    )
    nearest_resistance: Optional[float] = Field(
        default=None, description="Lowest resistance above current price"
    )
    all_levels: tuple[PriceLevel, ...] = Field(default=(), max_length=10)

    class Config:
        frozen = True


class StructureSet(BaseModel):
    trend: TrendStructure
    support_resistance: SupportResistance

    class Config:
        frozen = True


# =============================================================================
# OUTPUT: AnalysisReport
# =============================================================================


class AnalysisReport(BaseModel):
    """
    Complete technical analysis for one candle window.
    Returned by: Analysis Engine
    Consumed by: Signal Constructor, mention responder, analysis endpoint

    Never mutated after construction.
    """

    timeframe: str
    current_price: float
    indicators: IndicatorSet
    structure: StructureSet
    bias: Bias
    summary: tuple[str, ...]

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "timeframe": "1H",
                "current_price": 67250.5,
                "indicators": {
                    "ema": {"ema9": 67110.2, "ema21": 66890.4, "ema50": 66320.8, "ema200": 63980.1},
                    "rsi": {"value": 61.42, "signal": "neutral"},
                    "macd": {"macd": 210.4, "signal": 180.3, "histogram": 30.1, "crossover": "bullish"},
                    "volume": {"current": 812.4, "avg20": 640.2, "ratio": 1.27, "signal": "average"},
                },
                "structure": {
                    "trend": "uptrend (HH + HL)",
                    "support_resistance": {
                        "nearest_support": 66800.0,
                        "nearest_resistance": 67900.0,
                        "all_levels": [{"type": "resistance", "price": 67900.0}],
                    },
                },
                "bias": "Bullish",
                "summary": ["Trend: uptrend (HH + HL)", "Bias: Bullish"],
            }
        }
