"""
Analysis Engine Service

CONTRACT:
    Input:  Candle sequence (>= 200) + timeframe
    Output: AnalysisReport

RESPONSIBILITIES:
    - Orchestrate indicator calculation (EMA, RSI, MACD, volume)
    - Detect support/resistance and swing structure
    - Classify the directional bias (4-vote threshold)
    - Build the human-readable summary

PURE PYTHON - No I/O. Deterministic and side-effect free.
"""

from clon.services.analysis.interface import AnalysisEngineInterface, AnalysisRequest
from clon.services.analysis.engine import (
    AnalysisEngine,
    MIN_CANDLES,
    analyze,
    build_summary,
    classify_bias,
    get_analysis_engine,
)

__all__ = [
    "AnalysisEngineInterface",
    "AnalysisRequest",
    "AnalysisEngine",
    "MIN_CANDLES",
    "analyze",
    "build_summary",
    "classify_bias",
    "get_analysis_engine",
]
