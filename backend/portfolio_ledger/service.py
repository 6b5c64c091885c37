"""Ledger service: owns the ledger between a load and every save.

Each mutating call validates its input, updates the in-memory ledger and
immediately flushes the complete ledger back to the blob store.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from .alerts import AlertEvaluation, evaluate_alerts
from .csv_codec import decode_ledger, encode_ledger, export_filename
from .errors import InvalidInput
from .inputs import AlertInput, MasterInput, PriceInput, TradeInput, parse_input
from .models import AlertConfig, InstrumentMaster, Ledger, PositionView, PriceObservation, Trade
from .positions import PortfolioSummary, aggregate, summarize, value_positions
from .prices import add_price, get_series
from .providers import ManualPriceProvider, PriceProvider, resolve_current_prices
from .reports import Reports, reports
from .storage import DEFAULT_STORAGE_KEY, BlobStore, load_ledger, save_ledger

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]


@dataclass
class ImportResult:
    imported: bool
    reason: Optional[str] = None
    masters: int = 0
    trades: int = 0
    prices: int = 0
    alerts: int = 0


@dataclass
class Dashboard:
    """Everything one refresh of the portfolio view shows."""

    positions: List[PositionView]
    summary: PortfolioSummary
    alerts: List[str]
    reports: Reports
    masters: List[InstrumentMaster] = field(default_factory=list)


class LedgerService:
    def __init__(
        self,
        store: BlobStore,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        price_provider: PriceProvider | None = None,
        export_prefix: str | None = None,
    ) -> None:
        self.store = store
        self.storage_key = storage_key
        self.price_provider = price_provider or ManualPriceProvider()
        self.export_prefix = export_prefix
        self.ledger = load_ledger(store, storage_key)

    def save(self) -> None:
        save_ledger(self.store, self.ledger, self.storage_key)

    def reload(self) -> Ledger:
        self.ledger = load_ledger(self.store, self.storage_key)
        return self.ledger

    # Mutations

    def upsert_master(self, payload: Payload) -> InstrumentMaster:
        master = parse_input(MasterInput, payload).to_master()
        self.ledger.masters[master.symbol] = master
        self.save()
        return master

    def record_trade(self, payload: Payload) -> Trade:
        trade = parse_input(TradeInput, payload).to_trade()
        self.ledger.trades.append(trade)
        self.save()
        logger.debug("Recorded %s %s x%s @ %s", trade.side, trade.symbol, trade.quantity, trade.price)
        return trade

    def record_price(self, payload: Payload) -> List[PriceObservation]:
        data = parse_input(PriceInput, payload)
        series = add_price(self.ledger, data.symbol, data.to_observation())
        self.save()
        return list(series)

    def upsert_alert(self, payload: Payload) -> AlertConfig:
        data = parse_input(AlertInput, payload)
        config = data.to_config(self.ledger.alerts.get(data.symbol))
        self.ledger.alerts[config.symbol] = config
        self.save()
        return config

    # Queries

    def masters(self) -> List[InstrumentMaster]:
        return sorted(self.ledger.masters.values(), key=lambda master: master.symbol)

    def trades(self) -> List[Trade]:
        """Trades newest first, for display only; aggregation uses entry order."""

        return sorted(self.ledger.trades, key=lambda trade: trade.date, reverse=True)

    def price_series(self, symbol: str) -> List[PriceObservation]:
        return list(get_series(self.ledger, symbol))

    def alert_configs(self) -> Dict[str, AlertConfig]:
        return dict(self.ledger.alerts)

    async def current_prices(self) -> Dict[str, float]:
        symbols = [trade.symbol for trade in self.ledger.trades]
        return await resolve_current_prices(symbols, self.ledger, self.price_provider)

    async def positions(self) -> List[PositionView]:
        positions = aggregate(self.ledger.trades).values()
        return value_positions(positions, await self.current_prices(), self.ledger.masters)

    async def summary(self, views: List[PositionView] | None = None) -> PortfolioSummary:
        return summarize(views if views is not None else await self.positions())

    def reports(self) -> Reports:
        return reports(self.ledger.trades)

    async def evaluate_alerts(self, views: List[PositionView] | None = None) -> AlertEvaluation:
        """Run alert rules and persist the ratcheted trailing-stop state."""

        views = views if views is not None else await self.positions()
        evaluation = evaluate_alerts(views, self.ledger.alerts, self.ledger.prices)
        self.ledger.alerts = evaluation.alerts
        self.save()
        return evaluation

    async def dashboard(self) -> Dashboard:
        views = await self.positions()
        evaluation = await self.evaluate_alerts(views)
        return Dashboard(
            positions=views,
            summary=await self.summary(views),
            alerts=evaluation.messages,
            reports=self.reports(),
            masters=self.masters(),
        )

    # CSV backup

    def export_csv(self, today: dt.date | None = None) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` for the whole ledger."""

        kwargs = {"prefix": self.export_prefix} if self.export_prefix else {}
        filename = export_filename(today, **kwargs)
        text = encode_ledger(self.ledger)
        logger.info("Exported ledger to %s (%d trades)", filename, len(self.ledger.trades))
        return filename, text

    def import_csv(self, text: str) -> ImportResult:
        """Replace the whole ledger with the CSV contents.

        Empty or malformed input leaves the current ledger untouched.
        """

        try:
            parsed = decode_ledger(text)
        except InvalidInput as exc:
            logger.warning("CSV import rejected: %s", exc)
            return ImportResult(imported=False, reason=str(exc))
        if parsed is None:
            logger.info("CSV import contained no data rows; ledger unchanged")
            return ImportResult(imported=False, reason="no data rows")

        self.ledger.replace_with(parsed)
        self.save()
        result = ImportResult(
            imported=True,
            masters=len(parsed.masters),
            trades=len(parsed.trades),
            prices=sum(len(series) for series in parsed.prices.values()),
            alerts=len(parsed.alerts),
        )
        logger.info(
            "Imported ledger: %d masters, %d trades, %d prices, %d alerts",
            result.masters,
            result.trades,
            result.prices,
            result.alerts,
        )
        return result


__all__ = ["LedgerService", "ImportResult", "Dashboard"]
