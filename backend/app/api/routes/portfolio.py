"""Derived portfolio views."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_ledger_service
from app.schemas import AlertEvaluationSchema, DashboardSchema, PositionSchema, ReportsSchema
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("", response_model=DashboardSchema)
async def get_dashboard(service: LedgerService = Depends(get_ledger_service)) -> DashboardSchema:
    """Positions, totals, reports and alerts.

    Each call evaluates the alert rules, which advances and persists any
    trailing-stop high-water marks.
    """

    return DashboardSchema.model_validate(await service.dashboard())


@router.get("/positions", response_model=list[PositionSchema])
async def get_positions(service: LedgerService = Depends(get_ledger_service)) -> list[PositionSchema]:
    return [PositionSchema.model_validate(view) for view in await service.positions()]


@router.get("/reports", response_model=ReportsSchema)
async def get_reports(service: LedgerService = Depends(get_ledger_service)) -> ReportsSchema:
    return ReportsSchema.model_validate(service.reports())


@router.post("/alerts/evaluate", response_model=AlertEvaluationSchema)
async def evaluate_alerts(service: LedgerService = Depends(get_ledger_service)) -> AlertEvaluationSchema:
    return AlertEvaluationSchema.model_validate(await service.evaluate_alerts())
