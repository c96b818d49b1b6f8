import pytest
from datetime import datetime, timedelta, timezone

from clon.schemas.market import Candle, Ticker
from clon.services.base import ExternalAPIError
from clon.services.market_data.interface import MarketDataServiceInterface
from clon.schemas.analysis import (
    AnalysisReport,
    Bias,
    EMAValues,
    IndicatorSet,
    MACDCrossover,
    MACDData,
    RSIData,
    RSISignal,
    StructureSet,
    SupportResistance,
    TrendStructure,
    VolumeData,
    VolumeSignal,
)

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


def candles_from_closes(closes, spread=0.005, volumes=None):
    """One candle per close; high/low sit `spread` either side."""
    candles = []
    for i, close in enumerate(closes):
        candles.append(
            Candle(
                time=START + timedelta(hours=i),
                open=close,
                high=close * (1 + spread),
                low=close * (1 - spread),
                close=close,
                volume=volumes[i] if volumes is not None else 1000.0,
            )
        )
    return candles


@pytest.fixture
def make_candles():
    return candles_from_closes


@pytest.fixture
def rising_candles():
    """Accelerating rise, no pullback."""
    def _build(n=220):
        return candles_from_closes([100 + 0.01 * t * t for t in range(n)])
    return _build


@pytest.fixture
def falling_candles():
    """Accelerating decline, no bounce."""
    def _build(n=220):
        return candles_from_closes([1000 - 0.01 * t * t for t in range(n)])
    return _build


@pytest.fixture
def flat_candles():
    def _build(n=220):
        return candles_from_closes([100.0] * n, spread=0.0)
    return _build


@pytest.fixture
def make_report():
    """Hand-built AnalysisReport for constructor / responder tests."""
    def _build(
        bias=Bias.BULLISH,
        price=100.0,
        ema50=98.0,
        ema200=95.0,
        support=None,
        resistance=None,
        trend=TrendStructure.UPTREND,
        rsi_value=60.0,
        rsi_signal=RSISignal.NEUTRAL,
        histogram=0.5,
        timeframe="1H",
    ):
        indicators = IndicatorSet(
            ema=EMAValues(ema9=price, ema21=price, ema50=ema50, ema200=ema200),
            rsi=RSIData(value=rsi_value, signal=rsi_signal),
            macd=MACDData(
                macd=1.0,
                signal=1.0 - histogram,
                histogram=histogram,
                crossover=MACDCrossover.BULLISH if histogram > 0 else MACDCrossover.BEARISH,
            ),
            volume=VolumeData(current=1000.0, avg20=1000.0, ratio=1.0, signal=VolumeSignal.AVERAGE),
        )
        structure = StructureSet(
            trend=trend,
            support_resistance=SupportResistance(
                nearest_support=support, nearest_resistance=resistance
            ),
        )
        return AnalysisReport(
            timeframe=timeframe,
            current_price=price,
            indicators=indicators,
            structure=structure,
            bias=bias,
            summary=(f"Trend: {trend.value}", f"Bias: {bias.value}"),
        )
    return _build


class FakeMarketData(MarketDataServiceInterface):
    """Serves canned candles/tickers; symbols in `failing` raise ExternalAPIError."""

    def __init__(self, candles=None, prices=None, failing=()):
        self.candles = candles or {}
        self.prices = prices or {}
        self.failing = set(failing)
        self.candle_calls = []

    async def fetch_candles(self, symbol, timeframe="1H", limit=300):
        self.candle_calls.append((symbol, timeframe, limit))
        if symbol in self.failing:
            raise ExternalAPIError(self.name, f"{symbol} unavailable")
        return self.candles[(symbol, timeframe)]

    async def fetch_ticker(self, symbol):
        if symbol in self.failing:
            raise ExternalAPIError(self.name, f"{symbol} unavailable")
        return Ticker(symbol=symbol, price=self.prices[symbol], change_24h=0.0, volume_24h=1e6)

    async def health_check(self):
        return True


@pytest.fixture
def fake_market_data():
    return FakeMarketData
