"""Pydantic schema exports."""

from .ledger import (
    AlertConfigSchema,
    AlertUpsertRequest,
    InstrumentMasterSchema,
    MasterCreateRequest,
    PriceCreateRequest,
    PriceObservationSchema,
    TradeCreateRequest,
    TradeSchema,
)
from .portfolio import (
    AlertEvaluationSchema,
    DashboardSchema,
    ImportResultSchema,
    PortfolioSummarySchema,
    PositionSchema,
    ReportsSchema,
)

__all__ = [
    "AlertConfigSchema",
    "AlertEvaluationSchema",
    "AlertUpsertRequest",
    "DashboardSchema",
    "ImportResultSchema",
    "InstrumentMasterSchema",
    "MasterCreateRequest",
    "PortfolioSummarySchema",
    "PositionSchema",
    "PriceCreateRequest",
    "PriceObservationSchema",
    "ReportsSchema",
    "TradeCreateRequest",
    "TradeSchema",
]
