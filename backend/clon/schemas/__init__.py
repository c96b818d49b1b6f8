"""
Clon Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from clon.schemas.market import Candle, Ticker, Timeframe
from clon.schemas.analysis import (
    AnalysisReport,
    Bias,
    IndicatorSet,
    StructureSet,
    SupportResistance,
    PriceLevel,
    TrendStructure,
)
from clon.schemas.signal import (
    Direction,
    EntryZone,
    Signal,
    SignalStatus,
    StoredSignal,
    PerformanceSummary,
)
from clon.schemas.mention import MentionResponse, QuickSetup, MentionIntent
from clon.schemas.support import SupportReply

__all__ = [
    # Market
    "Candle",
    "Ticker",
    "Timeframe",
    # Analysis
    "AnalysisReport",
    "Bias",
    "IndicatorSet",
    "StructureSet",
    "SupportResistance",
    "PriceLevel",
    "TrendStructure",
    # Signal
    "Direction",
    "EntryZone",
    "Signal",
    "SignalStatus",
    "StoredSignal",
    "PerformanceSummary",
    # Mention / support
    "MentionResponse",
    "QuickSetup",
    "MentionIntent",
    "SupportReply",
]
