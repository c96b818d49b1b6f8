"""
Signal Constructor Implementation

Derives entry zone, stop loss, targets and risk/reward from an AnalysisReport.
PURE PYTHON - every rule is deterministic and auditable.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from clon.core.config import settings
from clon.schemas.analysis import AnalysisReport, Bias
from clon.schemas.signal import Direction, EntryZone, Signal, SignalStatus
from clon.services.indicators.calculations import round_half_away
from clon.services.signals.interface import SignalConstructorInterface, SignalRequest

logger = logging.getLogger(__name__)

ENTRY_BUFFER = 0.003  # 0.3% either side of price
EMA_STOP_BUFFER = 0.01
TARGET_1_FALLBACK = 0.025
TARGET_2_DISTANCE = 0.05


# =============================================================================
# SIGNAL MATH
# =============================================================================


def calc_entry_zone(price: float) -> EntryZone:
    """Symmetric zone around price, same for Long and Short."""
    buffer = price * ENTRY_BUFFER
    return EntryZone(
        low=round_half_away(price - buffer),
        mid=round_half_away(price),
        high=round_half_away(price + buffer),
    )


def calc_stop_loss(direction: Direction, report: AnalysisReport) -> float:
    """
    Long: the higher of (nearest support, else 0.99 x EMA200) and 0.99 x EMA50.
    Short: the lower of (nearest resistance, else 1.01 x EMA200) and 1.01 x EMA50.
    """
    sr = report.structure.support_resistance
    ema_values = report.indicators.ema

    if direction == Direction.LONG:
        floor = sr.nearest_support
        if floor is None:
            floor = ema_values.ema200 * (1 - EMA_STOP_BUFFER)
        return round_half_away(max(floor, ema_values.ema50 * (1 - EMA_STOP_BUFFER)))

    ceiling = sr.nearest_resistance
    if ceiling is None:
        ceiling = ema_values.ema200 * (1 + EMA_STOP_BUFFER)
    return round_half_away(min(ceiling, ema_values.ema50 * (1 + EMA_STOP_BUFFER)))


def calc_targets(
    direction: Direction, price: float, report: AnalysisReport
) -> tuple[float, float]:
    """Target 1 from structure (fallback ±2.5%), target 2 always ±5%."""
    sr = report.structure.support_resistance

    if direction == Direction.LONG:
        target_1 = sr.nearest_resistance
        if target_1 is None:
            target_1 = round_half_away(price * (1 + TARGET_1_FALLBACK))
        return target_1, round_half_away(price * (1 + TARGET_2_DISTANCE))

    target_1 = sr.nearest_support
    if target_1 is None:
        target_1 = round_half_away(price * (1 - TARGET_1_FALLBACK))
    return target_1, round_half_away(price * (1 - TARGET_2_DISTANCE))


def calc_risk_reward(entry: float, stop_loss: float, target: float) -> str:
    """'1:x' with x to one decimal; '0' when entry sits on the stop."""
    risk = abs(entry - stop_loss)
    reward = abs(target - entry)
    if risk == 0:
        return "0"
    # Fixed one decimal, so whole ratios read "1:2.0" rather than "1:2"
    return f"1:{round_half_away(reward / risk, 1):.1f}"


# =============================================================================
# SERVICE
# =============================================================================


class SignalConstructor(SignalConstructorInterface):
    """
    Signal Constructor.

    Neutral bias is a documented skip, not an error.
    Signals are frozen: levels never change after construction.
    """

    def __init__(
        self,
        disclaimer: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.disclaimer = disclaimer if disclaimer is not None else settings.disclaimer_text
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return "SignalConstructor"

    def build_signal(
        self,
        asset: str,
        timeframe: str,
        current_price: float,
        report: AnalysisReport,
    ) -> Optional[Signal]:
        if report.bias == Bias.NEUTRAL:
            logger.info(f"{asset} - Neutral, skipping signal")
            return None

        direction = Direction.LONG if report.bias == Bias.BULLISH else Direction.SHORT
        entry = calc_entry_zone(current_price)
        stop_loss = calc_stop_loss(direction, report)
        # Fallback targets follow the live ticker, not report.current_price (last close)
        targets = calc_targets(direction, current_price, report)

        return Signal(
            asset=asset,
            direction=direction,
            entry_zone=entry,
            stop_loss=stop_loss,
            targets=targets,
            timeframe=timeframe,
            rr_ratio=calc_risk_reward(entry.mid, stop_loss, targets[0]),
            reasoning=" | ".join(report.summary),
            status=SignalStatus.OPEN,
            disclaimer=self.disclaimer,
            timestamp=self._clock(),
        )

    async def execute(self, input_data: SignalRequest) -> Optional[Signal]:
        return self.build_signal(
            input_data.asset,
            input_data.timeframe,
            input_data.current_price,
            input_data.report,
        )

    async def health_check(self) -> bool:
        return True


def build_signal(
    asset: str, timeframe: str, current_price: float, report: AnalysisReport
) -> Optional[Signal]:
    """Build a signal with the configured disclaimer."""
    return SignalConstructor().build_signal(asset, timeframe, current_price, report)
