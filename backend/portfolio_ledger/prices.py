"""Per-symbol manual price series kept in ascending date order."""
from __future__ import annotations

from typing import List

from .models import Ledger, PriceObservation
from .symbols import normalize_symbol


def add_price(ledger: Ledger, symbol: str, observation: PriceObservation) -> List[PriceObservation]:
    """Append ``observation`` and re-sort the series by date.

    The sort is stable, so observations sharing a date stay in entry order.
    """

    series = ledger.prices.setdefault(normalize_symbol(symbol), [])
    series.append(observation)
    series.sort(key=lambda item: item.date)
    return series


def get_series(ledger: Ledger, symbol: str) -> List[PriceObservation]:
    return ledger.prices.get(normalize_symbol(symbol), [])


def latest_price(ledger: Ledger, symbol: str) -> float:
    """Return the most recent observed price, or 0 when the symbol has none."""

    series = get_series(ledger, symbol)
    if not series:
        return 0.0
    return series[-1].price


def last_observations(ledger: Ledger, symbol: str, count: int) -> List[PriceObservation]:
    if count <= 0:
        return []
    return get_series(ledger, symbol)[-count:]


__all__ = ["add_price", "get_series", "latest_price", "last_observations"]
