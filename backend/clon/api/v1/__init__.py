"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from clon.api.v1.endpoints import analysis, signals, performance, mention, support, market

router = APIRouter()

# Include all endpoint routers
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
router.include_router(signals.router, prefix="/signals", tags=["Signals"])
router.include_router(performance.router, prefix="/performance", tags=["Performance"])
router.include_router(mention.router, prefix="/mention", tags=["Mentions"])
router.include_router(support.router, prefix="/support", tags=["Support"])
router.include_router(market.router, prefix="/market", tags=["Market Data"])
