"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic.

EMA seeds with the SMA of its first `period` valid values, RSI uses Wilder
smoothing, MACD's signal line is an EMA over the valid part of the MACD line.
Nothing here rounds; callers round when they expose a value.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import numpy as np


# =============================================================================
# ROUNDING
# =============================================================================


def round_half_away(value: float, decimals: int = 2) -> float:
    """Round half away from zero at `decimals` places."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = float(Decimal(str(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))
    # Collapse -0.0
    return rounded if rounded != 0 else 0.0


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Leading NaNs are skipped, so the function can be chained on series that
    have their own warm-up (e.g. the MACD line).
    """
    result = np.full(len(data), np.nan)
    valid = np.flatnonzero(~np.isnan(data))
    if len(valid) == 0:
        return result

    start = valid[0]
    if len(data) - start < period:
        return result

    multiplier = 2 / (period + 1)

    # Start with SMA
    seed = start + period - 1
    result[seed] = np.mean(data[start : seed + 1])

    for i in range(seed + 1, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_gain == 0 and avg_loss == 0:
        # No movement at all
        return 50.0
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    if len(closes) < period + 1:
        return np.full(len(closes), np.nan)

    deltas = np.diff(closes)

    gains = np.where(deltas > 0, deltas, 0)
    losses = np.where(deltas < 0, -deltas, 0)

    # First average
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.full(len(closes), np.nan)
    result[period] = _rsi_from_averages(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_from_averages(avg_gain, avg_loss)

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLUME
# =============================================================================


def volume_ratio(volumes: np.ndarray, window: int = 20) -> tuple[float, float, float]:
    """
    Latest volume against the mean of the trailing `window` volumes.

    Returns: (current, average, ratio). Ratio is 0 when the average is 0.
    """
    current = float(volumes[-1])
    average = float(np.mean(volumes[-window:]))
    ratio = current / average if average > 0 else 0.0
    return current, average, ratio


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def find_pivot_levels(
    highs: np.ndarray,
    lows: np.ndarray,
    lookback: int = 50,
    window: int = 2,
) -> list[tuple[str, float]]:
    """
    Fractal pivots over the trailing `lookback` bars.

    A high is resistance when it is strictly greater than the `window` highs
    on each side; a low is support under the mirrored condition.

    Returns: [(type, price), ...] in scan order, resistance before support
    for the same bar.
    """
    recent_highs = highs[-lookback:]
    recent_lows = lows[-lookback:]

    levels = []
    for i in range(window, len(recent_highs) - window):
        neighbours = [j for j in range(i - window, i + window + 1) if j != i]

        if all(recent_highs[i] > recent_highs[j] for j in neighbours):
            levels.append(("resistance", float(recent_highs[i])))
        if all(recent_lows[i] < recent_lows[j] for j in neighbours):
            levels.append(("support", float(recent_lows[i])))

    return levels


def nearest_levels(
    levels: list[tuple[str, float]], current_price: float
) -> tuple[Optional[float], Optional[float]]:
    """
    Returns: (highest support strictly below price, lowest resistance strictly above price)
    """
    supports = [price for kind, price in levels if kind == "support" and price < current_price]
    resistances = [
        price for kind, price in levels if kind == "resistance" and price > current_price
    ]
    return (
        max(supports) if supports else None,
        min(resistances) if resistances else None,
    )


# =============================================================================
# TREND STRUCTURE
# =============================================================================


def detect_trend_structure(highs: np.ndarray, lows: np.ndarray, window: int = 20) -> str:
    """
    Coarse swing structure: compare the extrema of the earlier and later
    halves of the trailing `window` bars.
    """
    half = window // 2
    recent_highs = highs[-window:]
    recent_lows = lows[-window:]

    early_high, late_high = np.max(recent_highs[:half]), np.max(recent_highs[half:])
    early_low, late_low = np.min(recent_lows[:half]), np.min(recent_lows[half:])

    higher_highs = late_high > early_high
    higher_lows = late_low > early_low
    lower_highs = late_high < early_high
    lower_lows = late_low < early_low

    if higher_highs and higher_lows:
        return "uptrend (HH + HL)"
    if lower_highs and lower_lows:
        return "downtrend (LH + LL)"
    if higher_highs and lower_lows:
        return "volatile / expanding"
    return "ranging / consolidation"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None
