"""Instrument master endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_ledger_service
from app.schemas import InstrumentMasterSchema, MasterCreateRequest
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("", response_model=list[InstrumentMasterSchema])
async def list_masters(service: LedgerService = Depends(get_ledger_service)) -> list[InstrumentMasterSchema]:
    return [InstrumentMasterSchema.model_validate(master) for master in service.masters()]


@router.post("", response_model=InstrumentMasterSchema, status_code=status.HTTP_201_CREATED)
async def upsert_master(
    payload: MasterCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> InstrumentMasterSchema:
    return InstrumentMasterSchema.model_validate(service.upsert_master(payload))
