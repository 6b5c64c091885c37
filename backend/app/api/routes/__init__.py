"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .alerts import router as alerts_router
from .csv_backup import router as csv_router
from .masters import router as masters_router
from .portfolio import router as portfolio_router
from .prices import router as prices_router
from .trades import router as trades_router

api_router = APIRouter()
api_router.include_router(masters_router, prefix="/masters", tags=["masters"])
api_router.include_router(trades_router, prefix="/trades", tags=["trades"])
api_router.include_router(prices_router, prefix="/prices", tags=["prices"])
api_router.include_router(alerts_router, prefix="/alerts", tags=["alerts"])
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(csv_router, prefix="/csv", tags=["csv"])

__all__ = ["api_router"]
