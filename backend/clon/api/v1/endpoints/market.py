"""
Market Data API Endpoints
"""

import logging

from fastapi import APIRouter, Depends

from clon.api.v1.errors import http_error_for
from clon.schemas.market import Ticker
from clon.services.base import ServiceError
from clon.services.market_data import MarketDataService, get_market_data_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ticker/{symbol}", response_model=Ticker)
async def get_ticker(
    symbol: str,
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """24h ticker from Binance."""
    try:
        return await market_data.fetch_ticker(symbol.upper().strip())
    except ServiceError as e:
        raise http_error_for(e)
