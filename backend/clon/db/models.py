"""
SQLAlchemy models for Clon database.

Uses SQLite for local persistence of:
- Trade signals (append-only; only status fields change)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Float,
    DateTime,
    Text,
    Index,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class SignalRecord(Base):
    """
    Generated trade signals.
    Rows are never deleted. Only status, closed_at and result_pct change.
    """
    __tablename__ = "signals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    asset = Column(String(20), nullable=False, index=True)

    direction = Column(String(10), nullable=False)  # Long, Short

    # Entry
    entry_low = Column(Float, nullable=False)
    entry_high = Column(Float, nullable=False)

    # Risk management
    stop_loss = Column(Float, nullable=False)
    target_1 = Column(Float, nullable=True)
    target_2 = Column(Float, nullable=True)

    timeframe = Column(String(10), nullable=False)  # 5m, 15m, 1H, 4H, 1D
    rr_ratio = Column(String(20), nullable=False)

    # Open, TP1 Hit, TP2 Hit, SL Hit, Closed, Invalidated
    status = Column(String(20), nullable=False, default="Open", index=True)

    reasoning = Column(Text, nullable=True)
    disclaimer = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    result_pct = Column(Float, nullable=True)

    __table_args__ = (
        Index("ix_signals_status_closed", "status", "closed_at"),
    )
