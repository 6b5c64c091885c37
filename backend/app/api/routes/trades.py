"""Trade entry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_ledger_service
from app.schemas import TradeCreateRequest, TradeSchema
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("", response_model=list[TradeSchema])
async def list_trades(service: LedgerService = Depends(get_ledger_service)) -> list[TradeSchema]:
    """Return trades newest first."""

    return [TradeSchema.model_validate(trade) for trade in service.trades()]


@router.post("", response_model=TradeSchema, status_code=status.HTTP_201_CREATED)
async def record_trade(
    payload: TradeCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TradeSchema:
    return TradeSchema.model_validate(service.record_trade(payload))
