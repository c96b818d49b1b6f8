"""
Analysis Engine Implementation

Turns a candle window into indicator values, structure and a bias verdict.
Pure Python/NumPy, no I/O, no shared state: safe to call concurrently.
"""

from typing import Optional, Sequence
import numpy as np

from clon.schemas.market import Candle
from clon.schemas.analysis import (
    AnalysisReport,
    Bias,
    EMAValues,
    IndicatorSet,
    LevelType,
    MACDCrossover,
    MACDData,
    PriceLevel,
    RSIData,
    RSISignal,
    StructureSet,
    SupportResistance,
    TrendStructure,
    VolumeData,
    VolumeSignal,
)
from clon.services.base import InsufficientDataError
from clon.services.analysis.interface import AnalysisEngineInterface, AnalysisRequest
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

MIN_CANDLES = 200

EMA_PERIODS = (9, 21, 50, 200)
RSI_PERIOD = 14
RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
MACD_FAST, MACD_SLOW, MACD_SIGNAL = 12, 26, 9

VOLUME_WINDOW = 20
HIGH_VOLUME_RATIO = 1.5
LOW_VOLUME_RATIO = 0.6

SR_LOOKBACK = 50
PIVOT_WINDOW = 2
MAX_LEVELS = 10
TREND_WINDOW = 20

BIAS_VOTE_THRESHOLD = 4

VOLUME_LABELS = {
    VolumeSignal.HIGH: "high (strong conviction)",
    VolumeSignal.LOW: "low (weak conviction)",
    VolumeSignal.AVERAGE: "average",
}


def _candles_to_arrays(candles: Sequence[Candle]) -> tuple:
    """Convert candle list to numpy arrays."""
    closes = np.array([c.close for c in candles], dtype=float)
    highs = np.array([c.high for c in candles], dtype=float)
    lows = np.array([c.low for c in candles], dtype=float)
    volumes = np.array([c.volume for c in candles], dtype=float)
    return closes, highs, lows, volumes


class AnalysisEngine(AnalysisEngineInterface):
    """
    Analysis Engine.

    Produces one immutable AnalysisReport per (candles, timeframe).
    Identical input always yields an identical report.
    """

    @property
    def name(self) -> str:
        return "AnalysisEngine"

    def analyze(self, candles: Sequence[Candle], timeframe: str = "1H") -> AnalysisReport:
        """Analyse a candle window."""
        received = len(candles) if candles else 0
        if received < MIN_CANDLES:
            raise InsufficientDataError(self.name, MIN_CANDLES, received)

        closes, highs, lows, volumes = _candles_to_arrays(candles)
        current_price = round_half_away(closes[-1])

        indicators = IndicatorSet(
            ema=self._calculate_emas(closes),
            rsi=self._calculate_rsi(closes),
            macd=self._calculate_macd(closes),
            volume=self._calculate_volume(volumes),
        )
        structure = StructureSet(
            trend=TrendStructure(detect_trend_structure(highs, lows, TREND_WINDOW)),
            support_resistance=self._calculate_levels(highs, lows, current_price),
        )

        bias = classify_bias(current_price, indicators, structure)

        return AnalysisReport(
            timeframe=timeframe,
            current_price=current_price,
            indicators=indicators,
            structure=structure,
            bias=bias,
            summary=build_summary(current_price, indicators, structure, bias),
        )

    def _calculate_emas(self, closes: np.ndarray) -> EMAValues:
        values = [round_half_away(get_last_valid(ema(closes, period))) for period in EMA_PERIODS]
        return EMAValues(ema9=values[0], ema21=values[1], ema50=values[2], ema200=values[3])

    def _calculate_rsi(self, closes: np.ndarray) -> RSIData:
        value = round_half_away(get_last_valid(rsi(closes, RSI_PERIOD)))

        if value > RSI_OVERBOUGHT:
            signal = RSISignal.OVERBOUGHT
        elif value < RSI_OVERSOLD:
            signal = RSISignal.OVERSOLD
        else:
            signal = RSISignal.NEUTRAL

        return RSIData(value=value, signal=signal)

    def _calculate_macd(self, closes: np.ndarray) -> MACDData:
        macd_line, signal_line, histogram = macd(closes, MACD_FAST, MACD_SLOW, MACD_SIGNAL)
        last_hist = histogram[-1]
        prev_hist = histogram[-2]

        if last_hist > 0 and prev_hist <= 0:
            crossover = MACDCrossover.BULLISH_CROSSOVER
        elif last_hist < 0 and prev_hist >= 0:
            crossover = MACDCrossover.BEARISH_CROSSOVER
        elif last_hist > 0:
            crossover = MACDCrossover.BULLISH
        else:
            crossover = MACDCrossover.BEARISH

        return MACDData(
            macd=round_half_away(macd_line[-1]),
            signal=round_half_away(signal_line[-1]),
            histogram=round_half_away(last_hist),
            crossover=crossover,
        )

    def _calculate_volume(self, volumes: np.ndarray) -> VolumeData:
        current, average, ratio = volume_ratio(volumes, VOLUME_WINDOW)
        ratio = round_half_away(ratio)

        if ratio > HIGH_VOLUME_RATIO:
            signal = VolumeSignal.HIGH
        elif ratio < LOW_VOLUME_RATIO:
            signal = VolumeSignal.LOW
        else:
            signal = VolumeSignal.AVERAGE

        return VolumeData(
            current=round_half_away(current),
            avg20=round_half_away(average),
            ratio=ratio,
            signal=signal,
        )

    def _calculate_levels(
        self, highs: np.ndarray, lows: np.ndarray, current_price: float
    ) -> SupportResistance:
        levels = [
            (kind, round_half_away(price))
            for kind, price in find_pivot_levels(highs, lows, SR_LOOKBACK, PIVOT_WINDOW)
        ]
        support, resistance = nearest_levels(levels, current_price)

        return SupportResistance(
            nearest_support=support,
            nearest_resistance=resistance,
            all_levels=tuple(
                PriceLevel(type=LevelType(kind), price=price) for kind, price in levels[:MAX_LEVELS]
            ),
        )

    async def execute(self, input_data: AnalysisRequest) -> AnalysisReport:
        return self.analyze(input_data.candles, input_data.timeframe)

    async def health_check(self) -> bool:
        """Analysis engine is always healthy (pure computation)."""
        return True


# =============================================================================
# BIAS CLASSIFICATION
# =============================================================================


def classify_bias(price: float, indicators: IndicatorSet, structure: StructureSet) -> Bias:
    """
    Vote-based bias.

    Bull and bear votes are independent counters; a side needs 4 votes.
    RSI abstains at exactly 50 or when its own zone suppresses the vote.
    The trend adds at most one vote and is counted on top of the others.
    """
    bull_votes = 0
    bear_votes = 0

    if price > indicators.ema.ema50:
        bull_votes += 1
    else:
        bear_votes += 1

    if price > indicators.ema.ema200:
        bull_votes += 1
    else:
        bear_votes += 1

    rsi_data = indicators.rsi
    if rsi_data.value > 50 and rsi_data.signal != RSISignal.OVERBOUGHT:
        bull_votes += 1
    elif rsi_data.value < 50 and rsi_data.signal != RSISignal.OVERSOLD:
        bear_votes += 1

    if indicators.macd.histogram > 0:
        bull_votes += 1
    else:
        bear_votes += 1

    trend = structure.trend.value
    if "uptrend" in trend:
        bull_votes += 1
    if "downtrend" in trend:
        bear_votes += 1

    if bull_votes >= BIAS_VOTE_THRESHOLD:
        return Bias.BULLISH
    if bear_votes >= BIAS_VOTE_THRESHOLD:
        return Bias.BEARISH
    return Bias.NEUTRAL


# =============================================================================
# SUMMARY
# =============================================================================


def _level_text(level: Optional[float]) -> str:
    return str(level) if level is not None else "N/A"


def build_summary(
    price: float, indicators: IndicatorSet, structure: StructureSet, bias: Bias
) -> tuple[str, ...]:
    """Ordered display lines, also used as signal reasoning."""
    ema_values = indicators.ema
    macd_data = indicators.macd
    volume = indicators.volume
    sr = structure.support_resistance

    position_200 = "above" if price > ema_values.ema200 else "below"
    position_50 = "above" if price > ema_values.ema50 else "below"
    hist_sign = "+" if macd_data.histogram > 0 else ""

    return (
        f"Trend: {structure.trend.value}",
        f"EMA: Price {position_200} 200 EMA ({ema_values.ema200}), "
        f"{position_50} 50 EMA ({ema_values.ema50})",
        f"RSI: {indicators.rsi.value} ({indicators.rsi.signal.value})",
        f"MACD: {macd_data.crossover.value.replace('_', ' ')} | "
        f"Histogram {hist_sign}{macd_data.histogram}",
        f"Volume: {VOLUME_LABELS[volume.signal]} ({volume.ratio}x avg)",
        f"Nearest Support: {_level_text(sr.nearest_support)}",
        f"Nearest Resistance: {_level_text(sr.nearest_resistance)}",
        f"Bias: {bias.value}",
    )


# Singleton instance
_engine_instance: Optional[AnalysisEngine] = None


def get_analysis_engine() -> AnalysisEngine:
    """Get or create analysis engine instance."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = AnalysisEngine()
    return _engine_instance


def analyze(candles: Sequence[Candle], timeframe: str = "1H") -> AnalysisReport:
    """Module-level shortcut for the shared engine."""
    return get_analysis_engine().analyze(candles, timeframe)
