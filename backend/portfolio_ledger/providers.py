"""Current price providers.

The aggregation and alert code never look prices up themselves; they receive
a ``symbol -> price`` mapping built here. Swapping the manual provider for a
live one therefore does not change their contracts. Providers may answer
synchronously or return an awaitable.
"""
from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Dict, Iterable, Protocol, Union

from .errors import PriceLookupError
from .models import Ledger
from .prices import latest_price

logger = logging.getLogger(__name__)

PriceResult = Union[float, Awaitable[float]]


class PriceProvider(Protocol):
    def get_current_price(self, symbol: str, ledger: Ledger) -> PriceResult:
        ...


class ManualPriceProvider:
    """Use the most recent manual observation, or 0 when there is none."""

    def get_current_price(self, symbol: str, ledger: Ledger) -> float:
        return latest_price(ledger, symbol)


class ApiPriceProvider:
    """Placeholder for a live market data feed; every lookup fails."""

    async def get_current_price(self, symbol: str, ledger: Ledger) -> float:
        raise PriceLookupError(f"Live price lookup is not configured (symbol {symbol})")


async def lookup_price(provider: PriceProvider, symbol: str, ledger: Ledger) -> float:
    """Call ``provider`` and await the answer when it is asynchronous."""

    result = provider.get_current_price(symbol, ledger)
    if inspect.isawaitable(result):
        result = await result
    return float(result)


async def resolve_current_prices(
    symbols: Iterable[str],
    ledger: Ledger,
    provider: PriceProvider,
    *,
    fallback: PriceProvider | None = None,
) -> Dict[str, float]:
    """Ask ``provider`` for each symbol, falling back to manual prices on failure."""

    fallback = fallback or ManualPriceProvider()
    prices: Dict[str, float] = {}
    for symbol in symbols:
        if symbol in prices:
            continue
        try:
            prices[symbol] = await lookup_price(provider, symbol, ledger)
        except PriceLookupError as exc:
            logger.warning("Price lookup failed for %s, using manual price: %s", symbol, exc)
            prices[symbol] = await lookup_price(fallback, symbol, ledger)
    return prices


__all__ = [
    "PriceProvider",
    "ManualPriceProvider",
    "ApiPriceProvider",
    "lookup_price",
    "resolve_current_prices",
]
