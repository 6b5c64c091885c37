"""Pydantic schemas for derived portfolio views."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .ledger import AlertConfigSchema, InstrumentMasterSchema


class PositionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    broker: str
    name: str
    market: str
    sector: str
    quantity: float
    cost_basis: float
    average_cost: float
    current_price: float
    unrealized_pnl: float
    realized_pnl: float


class PortfolioSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_unrealized_pnl: float
    total_realized_pnl: float


class ReportsSchema(BaseModel):
    """Sell-side proceeds net of fees, bucketed by ``YYYY-MM`` and ``YYYY``."""

    model_config = ConfigDict(from_attributes=True)

    monthly: dict[str, float]
    yearly: dict[str, float]


class AlertEvaluationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    messages: list[str]
    alerts: dict[str, AlertConfigSchema]


class DashboardSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    summary: PortfolioSummarySchema
    alerts: list[str]
    positions: list[PositionSchema]
    reports: ReportsSchema
    masters: list[InstrumentMasterSchema]


class ImportResultSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    imported: bool
    reason: str | None = None
    masters: int = 0
    trades: int = 0
    prices: int = 0
    alerts: int = 0


__all__ = [
    "PositionSchema",
    "PortfolioSummarySchema",
    "ReportsSchema",
    "AlertEvaluationSchema",
    "DashboardSchema",
    "ImportResultSchema",
]
