"""
Signal Service Interfaces

Contracts for the signal constructor and the watchlist driver.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol

from clon.services.base import BaseService
from clon.schemas.analysis import AnalysisReport
from clon.schemas.signal import Signal


@dataclass(frozen=True)
class SignalRequest:
    """Everything the constructor needs, taken from one fetched snapshot."""

    asset: str
    timeframe: str
    current_price: float
    report: AnalysisReport


class SignalConstructorInterface(BaseService[SignalRequest, Optional[Signal]]):
    """
    Signal Constructor Contract.

    INPUT: SignalRequest
        - asset, timeframe
        - current_price: ticker price at generation time
        - report: AnalysisReport for the same candles

    OUTPUT: Signal, or None when the report's bias is Neutral
        - entry zone (price ± 0.3%)
        - stop loss from structure / EMA floors
        - two targets, risk/reward string
    """

    @property
    def name(self) -> str:
        return "SignalConstructor"

    @abstractmethod
    def build_signal(
        self,
        asset: str,
        timeframe: str,
        current_price: float,
        report: AnalysisReport,
    ) -> Optional[Signal]:
        """Build a signal synchronously."""
        pass

    @abstractmethod
    async def execute(self, input_data: SignalRequest) -> Optional[Signal]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


class SignalStore(Protocol):
    """Persistence collaborator used by the watchlist driver."""

    async def save(self, signal: Signal) -> Signal:
        ...
