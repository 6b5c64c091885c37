from __future__ import annotations

import pytest

from portfolio_ledger import Ledger, PriceLookupError, PriceObservation, normalize_symbol
from portfolio_ledger.prices import add_price, last_observations, latest_price
from portfolio_ledger.providers import ApiPriceProvider, ManualPriceProvider, resolve_current_prices


@pytest.mark.parametrize("raw", ["abc", "ABC", " abc ", "\taBc\n"])
def test_normalize_symbol_is_case_insensitive(raw):
    assert normalize_symbol(raw) == "ABC"
    assert normalize_symbol(normalize_symbol(raw)) == "ABC"


def test_normalize_symbol_handles_none():
    assert normalize_symbol(None) == ""


def test_series_sorted_after_every_insert_and_keeps_duplicates():
    ledger = Ledger()
    add_price(ledger, "abc", PriceObservation(date="2024-03-05", price=3))
    add_price(ledger, "ABC", PriceObservation(date="2024-03-01", price=1))
    add_price(ledger, " abc", PriceObservation(date="2024-03-05", price=4))
    add_price(ledger, "abc", PriceObservation(date="2024-03-02", price=2))

    series = ledger.prices["ABC"]
    assert [item.date for item in series] == ["2024-03-01", "2024-03-02", "2024-03-05", "2024-03-05"]
    assert [item.price for item in series] == [1, 2, 3, 4]
    assert latest_price(ledger, "abc") == 4
    assert [item.price for item in last_observations(ledger, "ABC", 2)] == [3, 4]


def test_latest_price_defaults_to_zero():
    assert latest_price(Ledger(), "NONE") == 0.0
    assert ManualPriceProvider().get_current_price("NONE", Ledger()) == 0.0


async def test_failing_provider_falls_back_to_manual_prices(caplog):
    ledger = Ledger()
    add_price(ledger, "ABC", PriceObservation(date="2024-03-01", price=12.5))
    prices = await resolve_current_prices(["ABC", "ABC", "XYZ"], ledger, ApiPriceProvider())
    assert prices == {"ABC": 12.5, "XYZ": 0.0}
    assert "Price lookup failed for ABC" in caplog.text


class _QuoteFeed:
    def __init__(self, quotes):
        self.quotes = quotes

    async def get_current_price(self, symbol, ledger):
        if symbol not in self.quotes:
            raise PriceLookupError(f"no quote for {symbol}")
        return self.quotes[symbol]


async def test_async_provider_answers_are_awaited():
    ledger = Ledger()
    add_price(ledger, "XYZ", PriceObservation(date="2024-03-01", price=7))
    prices = await resolve_current_prices(["ABC", "XYZ"], ledger, _QuoteFeed({"ABC": 101}))
    assert prices == {"ABC": 101.0, "XYZ": 7.0}


async def test_sync_provider_is_used_as_is():
    ledger = Ledger()
    add_price(ledger, "ABC", PriceObservation(date="2024-03-01", price=3))
    assert await resolve_current_prices(["ABC"], ledger, ManualPriceProvider()) == {"ABC": 3.0}
