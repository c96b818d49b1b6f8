"""
Analysis Engine Service Interface

Defines the contract for the technical analysis layer.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Sequence

from clon.services.base import BaseService
from clon.schemas.market import Candle
from clon.schemas.analysis import AnalysisReport


@dataclass(frozen=True)
class AnalysisRequest:
    """Candle window to analyse."""

    candles: Sequence[Candle]
    timeframe: str = "1H"


class AnalysisEngineInterface(BaseService[AnalysisRequest, AnalysisReport]):
    """
    Analysis Engine Contract.

    INPUT: AnalysisRequest
        - candles: oldest to newest, at least 200
        - timeframe: label carried into the report

    OUTPUT: AnalysisReport
        - indicators: EMA 9/21/50/200, RSI 14, MACD 12/26/9, volume ratio
        - structure: trend label, support/resistance
        - bias: Bullish / Bearish / Neutral / Wait
        - summary: ordered human-readable lines

    Raises InsufficientDataError for short windows. Never pads or extrapolates.
    """

    @property
    def name(self) -> str:
        return "AnalysisEngine"

    @abstractmethod
    def analyze(self, candles: Sequence[Candle], timeframe: str = "1H") -> AnalysisReport:
        """Run the full analysis synchronously."""
        pass

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisReport:
        """Service entry point."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Analysis engine is always healthy (pure computation)."""
        pass
