"""Validated inputs accepted at the ledger's ingestion boundary."""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidInput
from .models import UNASSIGNED_BROKER, AlertConfig, InstrumentMaster, PriceObservation, Trade
from .symbols import normalize_symbol

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_validation_error(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "input"
        messages.append(f"{location}: {error.get('msg', 'invalid value')}")
    return messages


def parse_input(model: Type[ModelT], data: Mapping[str, Any] | BaseModel) -> ModelT:
    """Validate ``data`` against ``model`` and raise :class:`InvalidInput` on failure."""

    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = describe_validation_error(exc)
        raise InvalidInput("; ".join(errors), errors=errors) from exc


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    symbol: str = Field(..., examples=["7203"])

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        symbol = normalize_symbol(value)
        if not symbol:
            raise ValueError("symbol must not be blank")
        return symbol


class MasterInput(_Input):
    name: str = ""
    market: str = ""
    sector: str = ""

    def to_master(self) -> InstrumentMaster:
        return InstrumentMaster(symbol=self.symbol, name=self.name, market=self.market, sector=self.sector)


class TradeInput(_Input):
    broker: str = Field(default=UNASSIGNED_BROKER, description="Broker or account name")
    side: Literal["BUY", "SELL"]
    quantity: float = Field(..., gt=0, allow_inf_nan=False)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    fee: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    date: dt.date

    @field_validator("broker")
    @classmethod
    def _default_broker(cls, value: str) -> str:
        return value or UNASSIGNED_BROKER

    @field_validator("side", mode="before")
    @classmethod
    def _upper_side(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    def to_trade(self) -> Trade:
        return Trade(
            symbol=self.symbol,
            broker=self.broker,
            side=self.side,
            quantity=self.quantity,
            price=self.price,
            fee=self.fee,
            date=self.date.isoformat(),
        )


class PriceInput(_Input):
    price: float = Field(..., ge=0, allow_inf_nan=False)
    date: dt.date

    def to_observation(self) -> PriceObservation:
        return PriceObservation(date=self.date.isoformat(), price=self.price)


class AlertInput(_Input):
    target_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    stop_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    use_three_sigma: bool = False
    trailing_percent: Optional[float] = Field(default=None, ge=0, le=100, allow_inf_nan=False)

    @field_validator("target_price", "stop_price", "trailing_percent", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_config(self, previous: AlertConfig | None = None) -> AlertConfig:
        """Build the config, carrying over the evaluator-owned state of ``previous``."""

        return AlertConfig(
            symbol=self.symbol,
            target_price=self.target_price,
            stop_price=self.stop_price,
            use_three_sigma=self.use_three_sigma,
            trailing_percent=self.trailing_percent,
            highest_price=previous.highest_price if previous else 0.0,
            trailing_stop=previous.trailing_stop if previous else None,
        )


__all__ = [
    "MasterInput",
    "TradeInput",
    "PriceInput",
    "AlertInput",
    "parse_input",
    "describe_validation_error",
]
