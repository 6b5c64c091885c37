"""Manual price observation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_ledger_service
from app.schemas import PriceCreateRequest, PriceObservationSchema
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("/{symbol}", response_model=list[PriceObservationSchema])
async def get_prices(symbol: str, service: LedgerService = Depends(get_ledger_service)) -> list[PriceObservationSchema]:
    return [PriceObservationSchema.model_validate(item) for item in service.price_series(symbol)]


@router.post("", response_model=list[PriceObservationSchema], status_code=status.HTTP_201_CREATED)
async def record_price(
    payload: PriceCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> list[PriceObservationSchema]:
    """Record an observation and return the symbol's full, date-sorted series."""

    return [PriceObservationSchema.model_validate(item) for item in service.record_price(payload)]
