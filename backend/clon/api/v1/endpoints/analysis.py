"""
Analysis API Endpoints

On-demand technical analysis for one symbol and timeframe.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from clon.api.v1.errors import http_error_for
from clon.core.config import Settings, get_settings
from clon.schemas.analysis import AnalysisReport
from clon.schemas.market import Timeframe
from clon.services.analysis import AnalysisEngine, get_analysis_engine
from clon.services.base import ServiceError
from clon.services.market_data import MarketDataService, get_market_data_service

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Request for a single-timeframe analysis."""

    symbol: str = Field(..., min_length=2, max_length=20)
    timeframe: Timeframe = Field(default=Timeframe.H1)


class AnalyzeResponse(BaseModel):
    symbol: str
    current_price: float = Field(..., description="Ticker price at request time")
    report: AnalysisReport
    disclaimer: str


@router.post("", response_model=AnalyzeResponse)
async def analyze_symbol(
    request: AnalyzeRequest,
    market_data: MarketDataService = Depends(get_market_data_service),
    engine: AnalysisEngine = Depends(get_analysis_engine),
    settings: Settings = Depends(get_settings),
):
    """
    Run the TA engine on the latest candles.

    Returns the full AnalysisReport plus the live ticker price.
    """
    symbol = request.symbol.upper().strip()
    timeframe = request.timeframe.value

    try:
        candles = await market_data.fetch_candles(symbol, timeframe, settings.candle_limit)
        ticker = await market_data.fetch_ticker(symbol)
        report = engine.analyze(candles, timeframe)
    except ServiceError as e:
        logger.warning(f"Analysis failed for {symbol} {timeframe}: {e}")
        raise http_error_for(e)

    return AnalyzeResponse(
        symbol=symbol,
        current_price=ticker.price,
        report=report,
        disclaimer=settings.disclaimer_text,
    )
