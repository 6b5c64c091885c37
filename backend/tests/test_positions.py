"""Weighted-average-cost aggregation tests."""

from __future__ import annotations

import pytest

from portfolio_ledger import InstrumentMaster, Position, Trade, aggregate, value_positions
from portfolio_ledger.models import UNASSIGNED_BROKER
from portfolio_ledger.positions import summarize


def _trade(side: str, quantity: float, price: float, fee: float = 0.0, **kwargs) -> Trade:
    defaults = {"symbol": "ABC", "broker": "SBI", "date": "2024-01-10"}
    defaults.update(kwargs)
    return Trade(side=side, quantity=quantity, price=price, fee=fee, **defaults)


def test_buy_then_partial_sell_scenario():
    trades = [_trade("BUY", 10, 100), _trade("BUY", 10, 200)]
    position = aggregate(trades)[("ABC", "SBI")]
    assert position.quantity == pytest.approx(20)
    assert position.cost_basis == pytest.approx(3000)
    assert position.average_cost == pytest.approx(150)

    trades.append(_trade("SELL", 5, 300, fee=10))
    position = aggregate(trades)[("ABC", "SBI")]
    assert position.realized_pnl == pytest.approx(740)
    assert position.quantity == pytest.approx(15)
    assert position.cost_basis == pytest.approx(2250)
    assert position.average_cost == pytest.approx(150)


def test_buy_only_positions_capitalise_fees():
    trades = [_trade("BUY", 3, 10, fee=1), _trade("BUY", 7, 12.5, fee=2.5)]
    position = aggregate(trades)[("ABC", "SBI")]
    assert position.cost_basis == pytest.approx(3 * 10 + 1 + 7 * 12.5 + 2.5)
    assert position.average_cost == pytest.approx(position.cost_basis / position.quantity)
    assert position.realized_pnl == 0


def test_selling_whole_position_at_average_cost_only_loses_fee():
    trades = [_trade("BUY", 4, 25), _trade("BUY", 6, 30), _trade("SELL", 10, 28, fee=3)]
    position = aggregate(trades)[("ABC", "SBI")]
    assert position.realized_pnl == pytest.approx(-3)
    assert position.quantity == pytest.approx(0)
    assert position.cost_basis == pytest.approx(0)
    assert position.average_cost == 0


def test_trades_are_folded_in_entry_order_not_date_order():
    sell_first_by_date = [
        _trade("BUY", 10, 100, date="2024-05-01"),
        _trade("SELL", 5, 120, date="2024-01-01"),
    ]
    position = aggregate(sell_first_by_date)[("ABC", "SBI")]
    assert position.realized_pnl == pytest.approx(5 * (120 - 100))


def test_overselling_goes_negative_without_error():
    trades = [_trade("BUY", 2, 50), _trade("SELL", 5, 60)]
    position = aggregate(trades)[("ABC", "SBI")]
    assert position.quantity == pytest.approx(-3)
    assert position.average_cost == 0
    # avg 50 applied to the whole sale, removing more cost than was held
    assert position.realized_pnl == pytest.approx(5 * (60 - 50))
    assert position.cost_basis == pytest.approx(100 - 250)


def test_sell_without_holdings_uses_zero_average():
    position = aggregate([_trade("SELL", 1, 40, fee=1)])[("ABC", "SBI")]
    assert position.realized_pnl == pytest.approx(39)
    assert position.quantity == pytest.approx(-1)


def test_positions_are_grouped_per_broker_with_placeholder():
    trades = [
        _trade("BUY", 1, 10, broker=""),
        _trade("BUY", 2, 10, broker="Rakuten"),
        _trade("BUY", 3, 10, broker=""),
    ]
    positions = aggregate(trades)
    assert list(positions) == [("ABC", UNASSIGNED_BROKER), ("ABC", "Rakuten")]
    assert positions[("ABC", UNASSIGNED_BROKER)].quantity == pytest.approx(4)


def test_value_positions_uses_injected_price_and_masters():
    trades = [_trade("BUY", 10, 100), _trade("BUY", 5, 10, symbol="XYZ")]
    masters = {"ABC": InstrumentMaster(symbol="ABC", name="Alpha", market="", sector="Tech")}
    views = value_positions(aggregate(trades).values(), {"ABC": 120.0}, masters)

    abc, xyz = views
    assert abc.current_price == 120.0
    assert abc.unrealized_pnl == pytest.approx(200)
    assert (abc.name, abc.market, abc.sector) == ("Alpha", "-", "Tech")
    assert xyz.current_price == 0.0
    assert xyz.unrealized_pnl == pytest.approx(-50)
    assert (xyz.name, xyz.market, xyz.sector) == ("-", "-", "-")

    summary = summarize(views)
    assert summary.total_unrealized_pnl == pytest.approx(150)
    assert summary.total_realized_pnl == 0


def test_average_cost_depends_on_quantity_only():
    assert Position(symbol="ABC", broker="SBI", quantity=4, cost_basis=0).average_cost == 0
    assert Position(symbol="ABC", broker="SBI", quantity=4, cost_basis=-8).average_cost == -2
    assert Position(symbol="ABC", broker="SBI", quantity=-3, cost_basis=30).average_cost == 0


def test_sell_after_free_shares_uses_zero_average():
    (position,) = aggregate([_trade("BUY", 10, 0), _trade("SELL", 4, 5)]).values()
    assert position.realized_pnl == pytest.approx(20)
    assert position.quantity == 6
    assert position.cost_basis == 0
