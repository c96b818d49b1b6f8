"""
Test indicator primitives
"""
import math

import numpy as np
import pytest

from clon.services.indicators.calculations import (
    round_half_away,
    ema,
    rsi,
    macd,
    volume_ratio,
    find_pivot_levels,
    nearest_levels,
    detect_trend_structure,
    get_last_valid,
)


def test_round_half_away_from_zero():
    # Binary floats would round these down
    assert round_half_away(2.675) == 2.68
    assert round_half_away(-2.675) == -2.68
    assert round_half_away(0.125) == 0.13
    assert round_half_away(1.25, 1) == 1.3


def test_round_collapses_negative_zero():
    value = round_half_away(-0.001)
    assert value == 0.0
    assert math.copysign(1, value) == 1


def test_ema_seeded_with_sma():
    data = np.arange(1, 11, dtype=float)
    result = ema(data, 3)

    assert np.isnan(result[:2]).all()
    assert result[2] == pytest.approx(2.0)
    # Linear input: EMA(3) lags by one step once seeded
    assert result[-1] == pytest.approx(9.0)


def test_ema_skips_leading_nans():
    data = np.array([np.nan, np.nan, 1.0, 2.0, 3.0, 4.0])
    result = ema(data, 2)

    assert np.isnan(result[:3]).all()
    assert result[3] == pytest.approx(1.5)
    assert result[4] == pytest.approx(2.5)
    assert result[5] == pytest.approx(3.5)


def test_ema_too_short_is_all_nan():
    assert np.isnan(ema(np.array([1.0, 2.0]), 5)).all()


def test_rsi_extremes():
    rising = np.arange(1, 31, dtype=float)
    falling = rising[::-1].copy()
    flat = np.full(30, 10.0)

    assert get_last_valid(rsi(rising)) == 100.0
    assert get_last_valid(rsi(falling)) == 0.0
    assert get_last_valid(rsi(flat)) == 50.0


def test_rsi_balanced_moves_are_neutral():
    # Alternating +1 / -1: average gain equals average loss
    closes = np.array([10.0 + (i % 2) for i in range(15)])
    result = rsi(closes, 14)

    assert result[14] == pytest.approx(50.0)


def test_rsi_needs_period_plus_one():
    assert np.isnan(rsi(np.arange(14, dtype=float), 14)).all()


def test_macd_signal_defined_after_warmup():
    closes = np.array([100 + 0.01 * t * t for t in range(120)])
    macd_line, signal_line, histogram = macd(closes)

    # Slow EMA seeds at index 25, signal EMA 8 bars later
    assert np.isnan(macd_line[24])
    assert not np.isnan(macd_line[25])
    assert np.isnan(signal_line[32])
    assert not np.isnan(signal_line[33])
    assert histogram[-1] > 0


def test_volume_ratio():
    volumes = np.array([100.0] * 19 + [300.0])
    current, average, ratio = volume_ratio(volumes, 20)

    assert current == 300.0
    assert average == pytest.approx(110.0)
    assert ratio == pytest.approx(300 / 110)


def test_volume_ratio_zero_average():
    assert volume_ratio(np.zeros(25), 20) == (0.0, 0.0, 0.0)


def test_pivot_levels_strict_window():
    highs = np.array([1.0, 2.0, 5.0, 2.0, 1.0])
    lows = np.array([0.5, 0.4, 0.1, 0.4, 0.5])

    assert find_pivot_levels(highs, lows, lookback=50, window=2) == [
        ("resistance", 5.0),
        ("support", 0.1),
    ]


def test_pivot_levels_ties_are_not_pivots():
    highs = np.array([1.0, 5.0, 5.0, 2.0, 1.0, 0.5])
    lows = np.full(6, 0.1)

    assert find_pivot_levels(highs, lows, lookback=50, window=2) == []


def test_pivot_levels_respect_lookback():
    # The only peak sits outside the trailing 10 bars
    highs = np.array([1.0, 2.0, 9.0, 2.0, 1.0] + [1.0] * 10)
    lows = np.full(15, 0.5)

    assert find_pivot_levels(highs, lows, lookback=10, window=2) == []


def test_nearest_levels():
    levels = [
        ("support", 90.0),
        ("support", 95.0),
        ("resistance", 105.0),
        ("resistance", 110.0),
        ("support", 100.0),
        ("resistance", 100.0),
    ]
    assert nearest_levels(levels, 100.0) == (95.0, 105.0)
    assert nearest_levels([], 100.0) == (None, None)


@pytest.mark.parametrize(
    "highs, lows, expected",
    [
        (np.arange(20, dtype=float) + 10, np.arange(20, dtype=float), "uptrend (HH + HL)"),
        (np.arange(20, 0, -1, dtype=float) + 10, np.arange(20, 0, -1, dtype=float), "downtrend (LH + LL)"),
        (np.array([10.0] * 10 + [12.0] * 10), np.array([8.0] * 10 + [6.0] * 10), "volatile / expanding"),
        (np.full(20, 10.0), np.full(20, 8.0), "ranging / consolidation"),
    ],
)
def test_trend_structure(highs, lows, expected):
    assert detect_trend_structure(highs, lows, 20) == expected


def test_get_last_valid():
    assert get_last_valid(np.array([1.0, 2.0, np.nan])) == 2.0
    assert get_last_valid(np.array([np.nan, np.nan])) is None


# ============ Reference values ============


WILDER_CLOSES = [
    44.34, 44.09, 44.15, 43.61, 44.33, 44.83, 45.10, 45.42,
    45.84, 46.08, 45.89, 46.03, 45.61, 46.28, 46.28, 46.00,
]


def test_rsi_reference_values():
    # Classic Wilder worksheet: avg gain 3.34/14, avg loss 1.40/14 on the first 14 changes
    result = rsi(np.array(WILDER_CLOSES), 14)

    assert result[14] == pytest.approx(70.4641, abs=1e-4)
    assert result[15] == pytest.approx(66.2496, abs=1e-4)
    assert round_half_away(result[14]) == 70.46
    assert round_half_away(result[15]) == 66.25


def test_macd_reference_values_on_linear_series():
    # SMA-seeded EMA(n) of a line with slope 2 trails it by (n - 1) steps:
    # EMA12 = x - 11, EMA26 = x - 25, so MACD = 14 and the signal line matches it
    closes = np.array([100.0 + 2 * t for t in range(80)])
    macd_line, signal_line, histogram = macd(closes, 12, 26, 9)

    assert macd_line[25] == pytest.approx(14.0)
    assert macd_line[-1] == pytest.approx(14.0)
    assert signal_line[-1] == pytest.approx(14.0)
    assert histogram[-1] == pytest.approx(0.0, abs=1e-9)
