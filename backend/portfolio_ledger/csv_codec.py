"""Tagged-row CSV encoding of the whole ledger.

Every entity type shares one flat 17-column table; the ``type`` column tells
the decoder which of ``MASTER``, ``TRADE``, ``PRICE`` or ``ALERT`` a row
holds. Columns that do not apply to a row are left blank.
"""
from __future__ import annotations

import csv
import datetime as dt
import io
import logging
import re
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from .errors import InvalidInput
from .formatting import format_number
from .inputs import describe_validation_error
from .models import (
    BUY,
    UNASSIGNED_BROKER,
    AlertConfig,
    InstrumentMaster,
    Ledger,
    PriceObservation,
    Trade,
)
from .prices import add_price
from .symbols import normalize_symbol

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "type",
    "symbol",
    "broker",
    "name",
    "market",
    "sector",
    "side",
    "quantity",
    "price",
    "fee",
    "date",
    "targetPrice",
    "stopPrice",
    "useThreeSigma",
    "trailingPercent",
    "highestPrice",
    "trailingStop",
]
ROW_TYPES = ("MASTER", "TRADE", "PRICE", "ALERT")
EXPORT_FILENAME_PREFIX = "portfolio-export"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _row(**values: Any) -> List[str]:
    return [_cell(values.get(column)) for column in CSV_COLUMNS]


def encode_rows(ledger: Ledger) -> List[List[str]]:
    rows: List[List[str]] = []
    for master in ledger.masters.values():
        rows.append(
            _row(type="MASTER", symbol=master.symbol, name=master.name, market=master.market, sector=master.sector)
        )
    for trade in ledger.trades:
        rows.append(
            _row(
                type="TRADE",
                symbol=trade.symbol,
                broker=trade.broker,
                side=trade.side,
                quantity=trade.quantity,
                price=trade.price,
                fee=trade.fee,
                date=trade.date,
            )
        )
    for symbol, series in ledger.prices.items():
        for item in series:
            rows.append(_row(type="PRICE", symbol=symbol, price=item.price, date=item.date))
    for symbol, alert in ledger.alerts.items():
        rows.append(
            _row(
                type="ALERT",
                symbol=symbol,
                targetPrice=alert.target_price,
                stopPrice=alert.stop_price,
                useThreeSigma="1" if alert.use_three_sigma else "0",
                trailingPercent=alert.trailing_percent,
                highestPrice=alert.highest_price,
                trailingStop=alert.trailing_stop,
            )
        )
    return rows


def encode_ledger(ledger: Ledger) -> str:
    """Serialise the ledger as CSV text with the fixed header first."""

    frame = pd.DataFrame(encode_rows(ledger), columns=CSV_COLUMNS, dtype=str)
    return frame.to_csv(index=False, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)


def export_filename(today: dt.date | None = None, prefix: str = EXPORT_FILENAME_PREFIX) -> str:
    today = today or dt.date.today()
    return f"{prefix}-{today.isoformat()}.csv"


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    symbol: str

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_cells(cls, data: Any) -> Any:
        # Blank cells fall back to the field defaults.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value != ""}
        return data

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return normalize_symbol(value)


def _iso_date(value: str) -> str:
    return dt.date.fromisoformat(value).isoformat()


class MasterRow(_Row):
    type: Literal["MASTER"]
    name: str = ""
    market: str = ""
    sector: str = ""

    def apply(self, ledger: Ledger) -> None:
        ledger.masters[self.symbol] = InstrumentMaster(
            symbol=self.symbol, name=self.name, market=self.market, sector=self.sector
        )


class TradeRow(_Row):
    type: Literal["TRADE"]
    broker: str = UNASSIGNED_BROKER
    side: Literal["BUY", "SELL"] = BUY
    quantity: float = Field(default=0.0, allow_inf_nan=False)
    price: float = Field(default=0.0, allow_inf_nan=False)
    fee: float = Field(default=0.0, allow_inf_nan=False)
    date: str

    @field_validator("side", mode="before")
    @classmethod
    def _upper_side(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return _iso_date(value)

    def apply(self, ledger: Ledger) -> None:
        ledger.trades.append(
            Trade(
                symbol=self.symbol,
                broker=self.broker,
                side=self.side,
                quantity=self.quantity,
                price=self.price,
                fee=self.fee,
                date=self.date,
            )
        )


class PriceRow(_Row):
    type: Literal["PRICE"]
    price: float = Field(default=0.0, allow_inf_nan=False)
    date: str

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return _iso_date(value)

    def apply(self, ledger: Ledger) -> None:
        add_price(ledger, self.symbol, PriceObservation(date=self.date, price=self.price))


class AlertRow(_Row):
    type: Literal["ALERT"]
    target_price: Optional[float] = Field(default=None, alias="targetPrice", allow_inf_nan=False)
    stop_price: Optional[float] = Field(default=None, alias="stopPrice", allow_inf_nan=False)
    use_three_sigma: bool = Field(default=False, alias="useThreeSigma")
    trailing_percent: Optional[float] = Field(default=None, alias="trailingPercent", allow_inf_nan=False)
    highest_price: float = Field(default=0.0, alias="highestPrice", allow_inf_nan=False)
    trailing_stop: Optional[float] = Field(default=None, alias="trailingStop", allow_inf_nan=False)

    @field_validator("use_three_sigma", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return value == "1"

    def apply(self, ledger: Ledger) -> None:
        ledger.alerts[self.symbol] = AlertConfig(
            symbol=self.symbol,
            target_price=self.target_price,
            stop_price=self.stop_price,
            use_three_sigma=self.use_three_sigma,
            trailing_percent=self.trailing_percent,
            highest_price=self.highest_price,
            trailing_stop=self.trailing_stop,
        )


LedgerRow = Annotated[Union[MasterRow, TradeRow, PriceRow, AlertRow], Field(discriminator="type")]
_ROW_ADAPTER: TypeAdapter[LedgerRow] = TypeAdapter(LedgerRow)


_BLANK_ROW = re.compile(r'^(?:\s*(?:"\s*")?\s*,)*\s*(?:"\s*")?\s*$')


def _skip_leading_blank_rows(text: str) -> Tuple[int, str]:
    """Drop blank rows (empty, whitespace or commas only) above the header."""

    lines = text.splitlines(keepends=True)
    skipped = 0
    while skipped < len(lines) and _BLANK_ROW.match(lines[skipped]):
        skipped += 1
    return skipped, "".join(lines[skipped:])


def parse_csv(text: str) -> List[Tuple[int, Dict[str, str]]]:
    """Tokenise CSV text into ``(row_number, record)`` pairs.

    The first non-blank row is the header. Quoted commas and newlines are
    honoured, cells are trimmed and fully blank rows are dropped. Row numbers
    count every CSV row, blank ones included, starting at 1. Raises
    :class:`InvalidInput` when the text is not well-formed CSV.
    """

    skipped, body = _skip_leading_blank_rows(text)
    if not body.strip():
        return []
    try:
        frame = pd.read_csv(
            io.StringIO(body),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            index_col=False,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, ValueError) as exc:
        raise InvalidInput(f"unreadable CSV: {exc}") from exc

    frame = frame.fillna("")
    frame.columns = [str(column).strip() for column in frame.columns]
    header_row = skipped + 1
    records: List[Tuple[int, Dict[str, str]]] = []
    for offset, raw in enumerate(frame.to_dict(orient="records"), start=1):
        record = {key: str(value).strip() for key, value in raw.items()}
        if any(record.values()):
            records.append((header_row + offset, record))
    return records


def decode_row(record: Dict[str, str], line: int) -> Optional[LedgerRow]:
    """Parse one record, returning ``None`` for rows the decoder ignores."""

    row_type = record.get("type", "")
    if not row_type or not normalize_symbol(record.get("symbol")):
        return None
    if row_type not in ROW_TYPES:
        logger.debug("Skipping CSV row %d with unknown type %r", line, row_type)
        return None
    try:
        return _ROW_ADAPTER.validate_python(record)
    except ValidationError as exc:
        errors = [f"row {line}: {message}" for message in describe_validation_error(exc)]
        raise InvalidInput("; ".join(errors), errors=errors) from exc


def decode_ledger(text: str) -> Optional[Ledger]:
    """Build a fresh ledger from CSV text.

    Returns ``None`` when the text holds no usable data rows, so callers can
    keep their current state. Raises :class:`InvalidInput` for malformed
    input; no partially built ledger is ever returned.
    """

    ledger = Ledger()
    accepted = 0
    for line, record in parse_csv(text):
        row = decode_row(record, line)
        if row is None:
            continue
        row.apply(ledger)
        accepted += 1
    if not accepted:
        return None
    return ledger


__all__ = [
    "CSV_COLUMNS",
    "ROW_TYPES",
    "LedgerRow",
    "MasterRow",
    "TradeRow",
    "PriceRow",
    "AlertRow",
    "encode_rows",
    "encode_ledger",
    "export_filename",
    "parse_csv",
    "decode_row",
    "decode_ledger",
]
