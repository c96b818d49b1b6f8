"""
Indicator Library

PURE PYTHON - NumPy calculations only.
    - EMA, Wilder RSI, MACD
    - Trailing volume ratio
    - Fractal pivot support/resistance
    - Swing-structure trend heuristic

Consumed by the Analysis Engine. All math is deterministic and reproducible.
"""

from clon.services.indicators.calculations import (
    ema,
    rsi,
    macd,
    volume_ratio,
    find_pivot_levels,
    nearest_levels,
    detect_trend_structure,
    get_last_valid,
    round_half_away,
)

__all__ = [
    "ema",
    "rsi",
    "macd",
    "volume_ratio",
    "find_pivot_levels",
    "nearest_levels",
    "detect_trend_structure",
    "get_last_valid",
    "round_half_away",
]
