"""
CONTRACT 3: Signal Constructor

Input: AnalysisReport + current price
Output: Signal (or None when the bias is Neutral)

Levels are fixed at construction. Only the persistence layer advances the
status, and never backwards.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class SignalStatus(str, Enum):
    OPEN = "Open"
    TP1_HIT = "TP1 Hit"
    TP2_HIT = "TP2 Hit"
    SL_HIT = "SL Hit"
    CLOSED = "Closed"
    INVALIDATED = "Invalidated"


# Lifecycle rank: a status may only move to a strictly higher rank.
STATUS_RANK = {
    SignalStatus.OPEN: 0,
    SignalStatus.TP1_HIT: 1,
    SignalStatus.TP2_HIT: 2,
    SignalStatus.SL_HIT: 2,
    SignalStatus.CLOSED: 2,
    SignalStatus.INVALIDATED: 2,
}

CLOSED_STATUSES = frozenset(
    {
        SignalStatus.TP2_HIT,
        SignalStatus.SL_HIT,
        SignalStatus.CLOSED,
        SignalStatus.INVALIDATED,
    }
)


# =============================================================================
# OUTPUT: Signal
# =============================================================================


class EntryZone(BaseModel):
    """Price zone for entry."""

    # Sub-cent prices round to 0 at two decimals
    low: float = Field(..., ge=0)
    mid: float = Field(..., ge=0)
    high: float = Field(..., ge=0)

    @field_validator("high")
    @classmethod
    def high_must_be_above_low(cls, v, info):
        low = info.data.get("low", 0)
        if v < low:
            raise ValueError("high must be >= low")
        return v

    class Config:
        frozen = True


class Signal(BaseModel):
    """
    Trade signal candidate.
    Returned by: Signal Constructor
    Consumed by: persistence layer, API
    """

    asset: str
    direction: Direction
    entry_zone: EntryZone
    stop_loss: float
    targets: tuple[float, float]
    timeframe: str
    rr_ratio: str = Field(..., description="'1:x' or '0' when risk is zero")
    reasoning: str
    status: SignalStatus = SignalStatus.OPEN
    disclaimer: str
    timestamp: datetime

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "asset": "BTCUSDT",
                "direction": "Long",
                "entry_zone": {"low": 67048.75, "mid": 67250.5, "high": 67452.25},
                "stop_loss": 66800.0,
                "targets": [67900.0, 70613.03],
                "timeframe": "1H",
                "rr_ratio": "1:1.4",
                "reasoning": "Trend: uptrend (HH + HL) | Bias: Bullish",
                "status": "Open",
                "disclaimer": "This analysis is for informational purposes only.",
                "timestamp": "2026-01-05T08:00:00Z",
            }
        }


# =============================================================================
# PERSISTED VIEWS
# =============================================================================


class StoredSignal(BaseModel):
    """Signal row as persisted."""

    id: str
    asset: str
    direction: Direction
    entry_low: float
    entry_high: float
    stop_loss: float
    target_1: Optional[float] = None
    target_2: Optional[float] = None
    timeframe: str
    rr_ratio: str
    status: SignalStatus
    reasoning: Optional[str] = None
    disclaimer: Optional[str] = None
    created_at: datetime
    closed_at: Optional[datetime] = None
    result_pct: Optional[float] = None

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    """Request to advance a signal's status. Checked against SignalStatus by the repository."""

    status: str = Field(..., examples=["TP1 Hit"])
    result_pct: Optional[float] = None


class PerformanceSummary(BaseModel):
    """Performance over closed signals."""

    total_signals: int = Field(..., ge=0)
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0, le=100)
    avg_result: float
    max_drawdown: float
