"""
Market Data Service Interface

Defines the contract for the market-data collaborator.
"""

from abc import abstractmethod
from dataclasses import dataclass

from clon.services.base import BaseService
from clon.schemas.market import Candle, Ticker


@dataclass(frozen=True)
class CandleRequest:
    symbol: str
    timeframe: str = "1H"
    limit: int = 300


class MarketDataServiceInterface(BaseService[CandleRequest, list[Candle]]):
    """
    Market Data Service Contract.

    INPUT: CandleRequest
        - symbol: exchange symbol, e.g. BTCUSDT
        - timeframe: 5m / 15m / 1H / 4H / 1D
        - limit: number of candles (or fewer)

    OUTPUT: list[Candle], oldest to newest

    Failures raise ExternalAPIError. No retries here.
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def fetch_candles(self, symbol: str, timeframe: str = "1H", limit: int = 300) -> list[Candle]:
        pass

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        pass

    async def execute(self, input_data: CandleRequest) -> list[Candle]:
        return await self.fetch_candles(input_data.symbol, input_data.timeframe, input_data.limit)

    @abstractmethod
    async def health_check(self) -> bool:
        pass
