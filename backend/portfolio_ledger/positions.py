"""Fold the trade history into per-broker positions and value them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .models import BUY, PLACEHOLDER, InstrumentMaster, Position, PositionView, Trade

PositionKey = Tuple[str, str]


@dataclass(frozen=True)
class PortfolioSummary:
    total_unrealized_pnl: float
    total_realized_pnl: float


def aggregate(trades: Iterable[Trade]) -> Dict[PositionKey, Position]:
    """Compute weighted-average-cost positions keyed by ``(symbol, broker)``.

    Trades are folded in sequence order, which is entry order and not
    necessarily date order. Fees are capitalised into the cost basis on buys
    and deducted from realized P&L on sells. Selling more than is held is not
    rejected; the quantity simply goes negative.
    """

    positions: Dict[PositionKey, Position] = {}
    for trade in trades:
        broker = trade.broker_key()
        key = (trade.symbol, broker)
        position = positions.get(key)
        if position is None:
            position = positions[key] = Position(symbol=trade.symbol, broker=broker)

        if trade.side == BUY:
            position.quantity += trade.quantity
            position.cost_basis += trade.quantity * trade.price + trade.fee
        else:
            if position.cost_basis > 0 and position.quantity > 0:
                avg = position.cost_basis / position.quantity
            else:
                avg = 0.0
            position.realized_pnl += trade.quantity * (trade.price - avg) - trade.fee
            position.quantity -= trade.quantity
            position.cost_basis -= avg * trade.quantity
    return positions


def value_positions(
    positions: Iterable[Position],
    current_prices: Mapping[str, float],
    masters: Mapping[str, InstrumentMaster] | None = None,
) -> List[PositionView]:
    """Attach current prices, unrealized P&L and master metadata.

    ``current_prices`` is resolved by the caller; symbols missing from it are
    valued at 0.
    """

    masters = masters or {}
    views: List[PositionView] = []
    for position in positions:
        current = current_prices.get(position.symbol, 0.0)
        avg = position.average_cost
        meta = masters.get(position.symbol)
        views.append(
            PositionView(
                symbol=position.symbol,
                broker=position.broker,
                quantity=position.quantity,
                cost_basis=position.cost_basis,
                average_cost=avg,
                realized_pnl=position.realized_pnl,
                current_price=current,
                unrealized_pnl=position.quantity * (current - avg),
                name=(meta.name if meta else "") or PLACEHOLDER,
                market=(meta.market if meta else "") or PLACEHOLDER,
                sector=(meta.sector if meta else "") or PLACEHOLDER,
            )
        )
    return views


def summarize(views: Sequence[PositionView]) -> PortfolioSummary:
    return PortfolioSummary(
        total_unrealized_pnl=sum(view.unrealized_pnl for view in views),
        total_realized_pnl=sum(view.realized_pnl for view in views),
    )


__all__ = ["PositionKey", "PortfolioSummary", "aggregate", "value_positions", "summarize"]
