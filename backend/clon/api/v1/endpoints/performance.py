"""
Performance API Endpoints
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from clon.db.database import get_db
from clon.db.signals import compute_performance
from clon.schemas.signal import PerformanceSummary

router = APIRouter()


@router.get("", response_model=PerformanceSummary)
async def get_performance(
    since: Optional[datetime] = Query(None, description="Only count signals closed at or after this time"),
    db: AsyncSession = Depends(get_db),
):
    """Win rate, average result and max drawdown over resolved signals."""
    return await compute_performance(db, since=since)
