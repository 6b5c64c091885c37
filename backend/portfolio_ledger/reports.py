"""Monthly and yearly sale proceeds reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from .models import SELL, Trade


@dataclass
class Reports:
    monthly: Dict[str, float] = field(default_factory=dict)
    yearly: Dict[str, float] = field(default_factory=dict)


def reports(trades: Iterable[Trade]) -> Reports:
    """Bucket sell-side cash flow (``quantity * price - fee``) by period.

    This is gross proceeds net of fees, not realized P&L against average
    cost; see :func:`portfolio_ledger.positions.aggregate` for the latter.
    """

    result = Reports()
    for trade in trades:
        if trade.side != SELL:
            continue
        amount = trade.quantity * trade.price - trade.fee
        month = trade.date[:7]
        year = trade.date[:4]
        result.monthly[month] = result.monthly.get(month, 0.0) + amount
        result.yearly[year] = result.yearly.get(year, 0.0) + amount
    return result


__all__ = ["Reports", "reports"]
