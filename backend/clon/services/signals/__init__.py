"""
Signal Services

CONTRACT:
    Input:  AnalysisReport + current price
    Output: Signal, or None when the bias is Neutral

RESPONSIBILITIES:
    - Entry zone, stop loss, targets and risk/reward (SignalConstructor)
    - Watchlist fan-out and persistence hand-off (WatchlistDriver)
"""

from clon.services.signals.interface import (
    SignalConstructorInterface,
    SignalRequest,
    SignalStore,
)
from clon.services.signals.constructor import (
    SignalConstructor,
    build_signal,
    calc_entry_zone,
    calc_risk_reward,
    calc_stop_loss,
    calc_targets,
)
from clon.services.signals.generator import WatchlistDriver

__all__ = [
    "SignalConstructorInterface",
    "SignalRequest",
    "SignalStore",
    "SignalConstructor",
    "build_signal",
    "calc_entry_zone",
    "calc_risk_reward",
    "calc_stop_loss",
    "calc_targets",
    "WatchlistDriver",
]
