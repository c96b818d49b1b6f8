"""
Clon Trade Agent - FastAPI application.

    uvicorn clon.main:app          (or python run_server.py)

Startup opens the SQLite signal store and the Redis market-data cache.
Redis is optional: without it the cache falls back to process memory.
The daily watchlist run is triggered externally (cron calls
POST /api/v1/signals/generate on Settings.signal_generation_cron).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clon.api.v1 import router as api_v1_router
from clon.core.config import settings
from clon.db.database import init_db, close_db
from clon.services.cache.redis_client import init_redis, close_redis, get_redis
from clon.services.market_data import get_market_data_service

logger = logging.getLogger(__name__)

API_DESCRIPTION = """
Technical analysis and trade signals for crypto pairs.

- **/analysis**: EMA 9/21/50/200, RSI 14, MACD 12/26/9, volume, pivots, bias
- **/signals**: daily watchlist signals; status only moves forward
- **/performance**: win rate, average result, max drawdown
- **/mention**: "@tradebot" replies with 1H + 4H confluence
- **/support**: platform help chat

Informational only. Not financial advice.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} v{settings.app_version} ({settings.environment})")
    await init_db()

    if await init_redis() is None:
        logger.info("Market-data cache: in-memory")

    watched = ", ".join(f"{entry.symbol}/{entry.timeframe}" for entry in settings.watchlist)
    logger.info(f"Watchlist [{watched}] on schedule '{settings.signal_generation_cron}'")

    yield

    await get_market_data_service().close()
    await close_redis()
    await close_db()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=API_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "cache": "redis" if get_redis() is not None else "memory",
    }


@app.get("/")
async def root():
    return {"service": settings.app_name, "docs": "/docs", "api": "/api/v1"}
