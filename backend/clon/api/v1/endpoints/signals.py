"""
Signal API Endpoints

Read signals, advance their status, trigger a watchlist run.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from clon.api.v1.errors import http_error_for
from clon.core.config import get_settings
from clon.db.database import get_db
from clon.db.signals import (
    DatabaseSignalStore,
    get_active_signals,
    get_closed_signals,
    get_todays_signals,
    update_signal_status,
)
from clon.schemas.signal import Signal, StoredSignal, StatusUpdate
from clon.services.base import ServiceError
from clon.services.market_data import get_market_data_service
from clon.services.signals import WatchlistDriver

logger = logging.getLogger(__name__)

router = APIRouter()


def get_watchlist_driver() -> WatchlistDriver:
    return WatchlistDriver(
        market_data=get_market_data_service(),
        store=DatabaseSignalStore(),
        settings=get_settings(),
    )


@router.get("/today", response_model=list[StoredSignal])
async def list_todays_signals(db: AsyncSession = Depends(get_db)):
    """Signals created since midnight UTC."""
    rows = await get_todays_signals(db)
    return [StoredSignal.model_validate(row) for row in rows]


@router.get("/active", response_model=list[StoredSignal])
async def list_active_signals(db: AsyncSession = Depends(get_db)):
    """Signals still Open."""
    rows = await get_active_signals(db)
    return [StoredSignal.model_validate(row) for row in rows]


@router.get("/closed", response_model=list[StoredSignal])
async def list_closed_signals(
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Signals past Open, most recently closed first."""
    rows = await get_closed_signals(db, limit=limit)
    return [StoredSignal.model_validate(row) for row in rows]


@router.patch("/{signal_id}/status", response_model=StoredSignal)
async def patch_signal_status(
    signal_id: str,
    update: StatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Advance a signal's status.

    Status only moves forward: Open -> TP1 Hit -> TP2 Hit / SL Hit / Closed / Invalidated.
    """
    try:
        row = await update_signal_status(db, signal_id, update.status, update.result_pct)
    except ServiceError as e:
        raise http_error_for(e)

    if row is None:
        raise HTTPException(status_code=404, detail=f"Signal {signal_id} not found")

    return StoredSignal.model_validate(row)


@router.post("/generate", response_model=list[Signal])
async def generate_signals(driver: WatchlistDriver = Depends(get_watchlist_driver)):
    """Run the watchlist now. Returns the signals that were stored."""
    signals = await driver.generate_daily_signals()
    logger.info(f"Manual run stored {len(signals)} signals")
    return signals
