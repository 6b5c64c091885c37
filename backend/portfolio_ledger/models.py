"""Domain models used by the portfolio ledger."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

BUY = "BUY"
SELL = "SELL"
TRADE_SIDES = (BUY, SELL)

UNASSIGNED_BROKER = "unassigned"
PLACEHOLDER = "-"


@dataclass(frozen=True)
class InstrumentMaster:
    """Optional descriptive metadata for a symbol."""

    symbol: str
    name: str = ""
    market: str = ""
    sector: str = ""


@dataclass(frozen=True)
class Trade:
    """A recorded buy or sell. Trades are never edited once appended."""

    symbol: str
    side: str
    quantity: float
    price: float
    fee: float = 0.0
    date: str = ""
    broker: str = ""

    def broker_key(self) -> str:
        """Return the broker used for grouping, falling back to the placeholder."""

        return self.broker or UNASSIGNED_BROKER


@dataclass(frozen=True)
class PriceObservation:
    """A manual closing price for a symbol on a given ISO date."""

    date: str
    price: float


@dataclass(frozen=True)
class AlertConfig:
    """Alert rules for a symbol.

    ``highest_price`` and ``trailing_stop`` are owned by the alert evaluator:
    they are rewritten on every evaluation and must be persisted with the
    ledger.
    """

    symbol: str
    target_price: Optional[float] = None
    stop_price: Optional[float] = None
    use_three_sigma: bool = False
    trailing_percent: Optional[float] = None
    highest_price: float = 0.0
    trailing_stop: Optional[float] = None


@dataclass
class Position:
    """Running aggregate for one (symbol, broker) pair."""

    symbol: str
    broker: str
    quantity: float = 0.0
    cost_basis: float = 0.0
    realized_pnl: float = 0.0

    @property
    def average_cost(self) -> float:
        if self.quantity > 0:
            return self.cost_basis / self.quantity
        return 0.0


@dataclass(frozen=True)
class PositionView:
    """A position valued at an externally supplied current price."""

    symbol: str
    broker: str
    quantity: float
    cost_basis: float
    average_cost: float
    realized_pnl: float
    current_price: float
    unrealized_pnl: float
    name: str = PLACEHOLDER
    market: str = PLACEHOLDER
    sector: str = PLACEHOLDER


@dataclass
class Ledger:
    """The complete persisted state of a portfolio."""

    masters: Dict[str, InstrumentMaster] = field(default_factory=dict)
    trades: List[Trade] = field(default_factory=list)
    alerts: Dict[str, AlertConfig] = field(default_factory=dict)
    prices: Dict[str, List[PriceObservation]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.masters or self.trades or self.alerts or self.prices)

    def replace_with(self, other: "Ledger") -> None:
        """Swap in the contents of ``other`` as a single update."""

        self.masters, self.trades, self.alerts, self.prices = (
            other.masters,
            other.trades,
            other.alerts,
            other.prices,
        )


__all__ = [
    "BUY",
    "SELL",
    "TRADE_SIDES",
    "UNASSIGNED_BROKER",
    "PLACEHOLDER",
    "InstrumentMaster",
    "Trade",
    "PriceObservation",
    "AlertConfig",
    "Position",
    "PositionView",
    "Ledger",
]
