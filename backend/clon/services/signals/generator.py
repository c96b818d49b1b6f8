"""
Watchlist Driver

Runs the analysis -> signal pipeline for every configured watchlist entry.
Triggered by an external scheduler (see Settings.signal_generation_cron) or
manually through the API.
"""

import asyncio
import logging
from typing import Optional

from clon.core.config import Settings, WatchlistEntry, settings as default_settings
from clon.schemas.signal import Signal
from clon.services.analysis.engine import AnalysisEngine, get_analysis_engine
from clon.services.market_data.interface import MarketDataServiceInterface
from clon.services.signals.constructor import SignalConstructor
from clon.services.signals.interface import SignalStore

logger = logging.getLogger(__name__)


class WatchlistDriver:
    """
    Generates and stores signals for the watchlist.

    Entries fan out concurrently; each entry's own steps are sequential.
    A failure on one asset is logged and does not affect the others.
    """

    def __init__(
        self,
        market_data: MarketDataServiceInterface,
        store: SignalStore,
        settings: Optional[Settings] = None,
        engine: Optional[AnalysisEngine] = None,
        constructor: Optional[SignalConstructor] = None,
    ):
        self.settings = settings or default_settings
        self.market_data = market_data
        self.store = store
        self.engine = engine or get_analysis_engine()
        self.constructor = constructor or SignalConstructor(disclaimer=self.settings.disclaimer_text)

    async def generate_signal_for_asset(self, symbol: str, timeframe: str) -> Optional[Signal]:
        """Build a signal for one asset. None when the bias is Neutral."""
        candles = await self.market_data.fetch_candles(symbol, timeframe, self.settings.candle_limit)
        ticker = await self.market_data.fetch_ticker(symbol)
        report = self.engine.analyze(candles, timeframe)
        return self.constructor.build_signal(symbol, timeframe, ticker.price, report)

    async def _process_entry(self, entry: WatchlistEntry) -> Optional[Signal]:
        try:
            signal = await self.generate_signal_for_asset(entry.symbol, entry.timeframe)
            if signal is None:
                return None
            return await self.store.save(signal)
        except Exception as e:
            logger.error(f"Signal generation failed for {entry.symbol} ({entry.timeframe}): {e}")
            return None

    async def generate_daily_signals(self) -> list[Signal]:
        """Run the whole watchlist. Returns saved signals in watchlist order."""
        watchlist = self.settings.watchlist
        logger.info(f"Generating signals for {len(watchlist)} watchlist entries")

        results = await asyncio.gather(*(self._process_entry(entry) for entry in watchlist))
        signals = [signal for signal in results if signal is not None]

        logger.info(f"Generated {len(signals)} signals")
        return signals
