"""
Signal persistence.

Signals are never deleted. The only mutation is a forward status change.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence, Union

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clon.db.database import AsyncSessionLocal
from clon.db.models import SignalRecord
from clon.schemas.signal import (
    Signal,
    SignalStatus,
    STATUS_RANK,
    CLOSED_STATUSES,
    PerformanceSummary,
)
from clon.services.base import ValidationError, InvalidStatusTransitionError
from clon.services.indicators.calculations import round_half_away

logger = logging.getLogger(__name__)

SERVICE_NAME = "SignalRepository"

WIN_STATUSES = (SignalStatus.TP1_HIT.value, SignalStatus.TP2_HIT.value, SignalStatus.CLOSED.value)
LOSS_STATUSES = (SignalStatus.SL_HIT.value,)
EXCLUDED_FROM_PERFORMANCE = (SignalStatus.OPEN.value, SignalStatus.INVALIDATED.value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# WRITES
# =============================================================================


async def save_signal(session: AsyncSession, signal: Signal) -> SignalRecord:
    """Store a new signal. Returns the row with its id."""
    record = SignalRecord(
        asset=signal.asset,
        direction=signal.direction.value,
        entry_low=signal.entry_zone.low,
        entry_high=signal.entry_zone.high,
        stop_loss=signal.stop_loss,
        target_1=signal.targets[0],
        target_2=signal.targets[1],
        timeframe=signal.timeframe,
        rr_ratio=signal.rr_ratio,
        status=signal.status.value,
        reasoning=signal.reasoning,
        disclaimer=signal.disclaimer,
        created_at=signal.timestamp,
    )
    session.add(record)
    await session.flush()
    logger.info(f"Saved signal {record.id}: {record.asset} {record.direction} {record.timeframe}")
    return record


def _parse_status(status: Union[str, SignalStatus]) -> SignalStatus:
    try:
        return SignalStatus(status)
    except ValueError:
        raise ValidationError(SERVICE_NAME, f"Invalid status: {status}", {"status": str(status)})


async def update_signal_status(
    session: AsyncSession,
    signal_id: str,
    status: Union[str, SignalStatus],
    result_pct: Optional[float] = None,
) -> Optional[SignalRecord]:
    """
    Advance a signal's status.

    Open -> TP1 Hit -> {TP2 Hit, SL Hit, Closed, Invalidated}. Moving sideways
    or backwards raises InvalidStatusTransitionError. Returns None when the
    id is unknown.
    """
    new_status = _parse_status(status)

    result = await session.execute(
        select(SignalRecord).where(SignalRecord.id == signal_id)
    )
    record = result.scalar_one_or_none()
    if record is None:
        return None

    current = SignalStatus(record.status)
    if STATUS_RANK[new_status] <= STATUS_RANK[current]:
        raise InvalidStatusTransitionError(
            SERVICE_NAME,
            f"Cannot move signal {signal_id} from '{current.value}' to '{new_status.value}'",
            {"signal_id": signal_id, "from": current.value, "to": new_status.value},
        )

    record.status = new_status.value
    if result_pct is not None:
        record.result_pct = result_pct
    if new_status in CLOSED_STATUSES:
        record.closed_at = _utcnow()

    await session.flush()
    logger.info(f"Signal {signal_id}: {current.value} -> {new_status.value}")
    return record


# =============================================================================
# READS
# =============================================================================


async def get_signal(session: AsyncSession, signal_id: str) -> Optional[SignalRecord]:
    result = await session.execute(
        select(SignalRecord).where(SignalRecord.id == signal_id)
    )
    return result.scalar_one_or_none()


async def get_todays_signals(session: AsyncSession, now: Optional[datetime] = None) -> Sequence[SignalRecord]:
    """Signals created since midnight UTC, newest first."""
    now = now or _utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

    result = await session.execute(
        select(SignalRecord)
        .where(SignalRecord.created_at >= start_of_day)
        .order_by(SignalRecord.created_at.desc())
    )
    return result.scalars().all()


async def get_active_signals(session: AsyncSession) -> Sequence[SignalRecord]:
    """Signals still Open, newest first."""
    result = await session.execute(
        select(SignalRecord)
        .where(SignalRecord.status == SignalStatus.OPEN.value)
        .order_by(SignalRecord.created_at.desc())
    )
    return result.scalars().all()


async def get_closed_signals(session: AsyncSession, limit: int = 50) -> Sequence[SignalRecord]:
    """Signals past Open, most recently closed first."""
    result = await session.execute(
        select(SignalRecord)
        .where(SignalRecord.status != SignalStatus.OPEN.value)
        .order_by(SignalRecord.closed_at.desc().nulls_last(), SignalRecord.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()


async def compute_performance(session: AsyncSession, since: Optional[datetime] = None) -> PerformanceSummary:
    """
    Win/loss statistics over resolved signals.

    Open and Invalidated signals are excluded. When `since` is given only
    signals closed at or after it count.
    """
    query = select(
        func.count(case((SignalRecord.status.in_(WIN_STATUSES), 1))),
        func.count(case((SignalRecord.status.in_(LOSS_STATUSES), 1))),
        func.count(SignalRecord.id),
        func.avg(SignalRecord.result_pct),
        func.min(SignalRecord.result_pct),
    ).where(SignalRecord.status.not_in(EXCLUDED_FROM_PERFORMANCE))

    if since is not None:
        query = query.where(SignalRecord.closed_at >= since)

    result = await session.execute(query)
    wins, losses, total, avg_result, max_drawdown = result.one()

    wins = wins or 0
    losses = losses or 0
    total = total or 0

    return PerformanceSummary(
        total_signals=total,
        wins=wins,
        losses=losses,
        win_rate=round_half_away(wins / total * 100) if total > 0 else 0.0,
        avg_result=round_half_away(avg_result or 0.0),
        max_drawdown=round_half_away(max_drawdown or 0.0),
    )


# =============================================================================
# STORE ADAPTER
# =============================================================================


class DatabaseSignalStore:
    """Saves constructed signals through a session factory."""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self._session_factory = session_factory or AsyncSessionLocal

    async def save(self, signal: Signal) -> Signal:
        async with self._session_factory() as session:
            try:
                await save_signal(session, signal)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return signal
