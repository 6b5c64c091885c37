"""Alert configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_ledger_service
from app.schemas import AlertConfigSchema, AlertUpsertRequest
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("", response_model=list[AlertConfigSchema])
async def list_alerts(service: LedgerService = Depends(get_ledger_service)) -> list[AlertConfigSchema]:
    return [AlertConfigSchema.model_validate(config) for config in service.alert_configs().values()]


@router.post("", response_model=AlertConfigSchema)
async def upsert_alert(
    payload: AlertUpsertRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> AlertConfigSchema:
    """Replace a symbol's rules; the trailing-stop high-water mark is kept."""

    return AlertConfigSchema.model_validate(service.upsert_alert(payload))
