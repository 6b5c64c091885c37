"""Pydantic schemas for ledger entries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from portfolio_ledger.inputs import AlertInput, MasterInput, PriceInput, TradeInput


class MasterCreateRequest(MasterInput):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"symbol": "7203", "name": "Toyota Motor", "market": "TSE Prime", "sector": "Automobiles"}
        }
    )


class TradeCreateRequest(TradeInput):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "symbol": "7203",
                "broker": "SBI",
                "side": "BUY",
                "quantity": 100,
                "price": 2500,
                "fee": 0,
                "date": "2024-03-01",
            }
        }
    )


class PriceCreateRequest(PriceInput):
    model_config = ConfigDict(json_schema_extra={"example": {"symbol": "7203", "price": 2650, "date": "2024-03-04"}})


class AlertUpsertRequest(AlertInput):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "symbol": "7203",
                "target_price": 3000,
                "stop_price": 2200,
                "use_three_sigma": True,
                "trailing_percent": 10,
            }
        }
    )


class InstrumentMasterSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str
    market: str
    sector: str


class TradeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    broker: str
    side: str
    quantity: float
    price: float
    fee: float
    date: str


class PriceObservationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    price: float


class AlertConfigSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    target_price: float | None = None
    stop_price: float | None = None
    use_three_sigma: bool = False
    trailing_percent: float | None = None
    highest_price: float = 0.0
    trailing_stop: float | None = None


__all__ = [
    "MasterCreateRequest",
    "TradeCreateRequest",
    "PriceCreateRequest",
    "AlertUpsertRequest",
    "InstrumentMasterSchema",
    "TradeSchema",
    "PriceObservationSchema",
    "AlertConfigSchema",
]
