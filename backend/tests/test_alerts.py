"""Alert rule and trailing-stop state tests."""

from __future__ import annotations

import pytest

from portfolio_ledger import AlertConfig, PositionView, PriceObservation, evaluate_alerts


def _view(symbol: str, current: float, broker: str = "SBI") -> PositionView:
    return PositionView(
        symbol=symbol,
        broker=broker,
        quantity=10,
        cost_basis=1000,
        average_cost=100,
        realized_pnl=0,
        current_price=current,
        unrealized_pnl=10 * (current - 100),
    )


def _series(prices):
    return [PriceObservation(date=f"2024-02-{index + 1:02d}", price=price) for index, price in enumerate(prices)]


def test_target_price_fires_only_at_or_above_target():
    alerts = {"ABC": AlertConfig(symbol="ABC", target_price=150)}
    assert evaluate_alerts([_view("ABC", 160)], alerts, {}).messages == ["ABC: target price 150 reached"]
    assert evaluate_alerts([_view("ABC", 140)], alerts, {}).messages == []
    assert evaluate_alerts([_view("ABC", 150)], alerts, {}).messages == ["ABC: target price 150 reached"]


def test_stop_price_and_target_fire_independently():
    alerts = {"ABC": AlertConfig(symbol="ABC", target_price=90, stop_price=95.5)}
    result = evaluate_alerts([_view("ABC", 92)], alerts, {})
    assert result.messages == ["ABC: target price 90 reached", "ABC: stop-loss 95.5 reached"]


def test_zero_thresholds_are_ignored():
    alerts = {"ABC": AlertConfig(symbol="ABC", target_price=0, stop_price=0, trailing_percent=0)}
    result = evaluate_alerts([_view("ABC", 0)], alerts, {})
    assert result.messages == []
    assert result.alerts["ABC"].highest_price == 0


def test_missing_config_is_a_no_op():
    result = evaluate_alerts([_view("XYZ", 10)], {}, {})
    assert result.messages == []
    assert result.alerts == {}


def test_three_sigma_breaches():
    prices = {"ABC": _series([100.0, 110.0] * 10)}
    alerts = {"ABC": AlertConfig(symbol="ABC", use_three_sigma=True)}
    # mean 105, population std 5 -> band 90..120
    upper = evaluate_alerts([_view("ABC", 121)], alerts, prices)
    assert upper.messages == ["ABC: 3σ upper band (120.00) reached"]
    lower = evaluate_alerts([_view("ABC", 90)], alerts, prices)
    assert lower.messages == ["ABC: 3σ lower band (90.00) reached"]
    inside = evaluate_alerts([_view("ABC", 105)], alerts, prices)
    assert inside.messages == []


def test_three_sigma_skipped_without_enough_prices():
    prices = {"ABC": _series([100.0] * 19)}
    alerts = {"ABC": AlertConfig(symbol="ABC", use_three_sigma=True)}
    assert evaluate_alerts([_view("ABC", 1000)], alerts, prices).messages == []


def test_constant_series_fires_both_bands_at_that_price():
    prices = {"ABC": _series([50.0] * 20)}
    alerts = {"ABC": AlertConfig(symbol="ABC", use_three_sigma=True)}
    result = evaluate_alerts([_view("ABC", 50)], alerts, prices)
    assert result.messages == ["ABC: 3σ upper band (50.00) reached", "ABC: 3σ lower band (50.00) reached"]


def test_trailing_stop_ratchets_and_never_moves_down():
    config = AlertConfig(symbol="ABC", trailing_percent=10)

    first = evaluate_alerts([_view("ABC", 200)], {"ABC": config}, {})
    state = first.alerts["ABC"]
    assert first.messages == []
    assert state.highest_price == 200
    assert state.trailing_stop == pytest.approx(180)
    # input config is not mutated
    assert config.highest_price == 0

    second = evaluate_alerts([_view("ABC", 185)], first.alerts, {})
    assert second.messages == []
    assert second.alerts["ABC"].highest_price == 200
    assert second.alerts["ABC"].trailing_stop == pytest.approx(180)

    third = evaluate_alerts([_view("ABC", 175)], second.alerts, {})
    assert third.messages == ["ABC: trailing stop (180.00) reached"]
    assert third.alerts["ABC"].highest_price == 200

    fourth = evaluate_alerts([_view("ABC", 250)], third.alerts, {})
    assert fourth.alerts["ABC"].highest_price == 250
    assert fourth.alerts["ABC"].trailing_stop == pytest.approx(225)


def test_trailing_stop_untouched_without_price():
    config = AlertConfig(symbol="ABC", trailing_percent=5, highest_price=100, trailing_stop=95)
    result = evaluate_alerts([_view("ABC", 0)], {"ABC": config}, {})
    assert result.alerts["ABC"] == config
    assert result.messages == []


def test_symbol_held_at_two_brokers_is_evaluated_per_position():
    alerts = {"ABC": AlertConfig(symbol="ABC", target_price=10)}
    views = [_view("ABC", 12, broker="SBI"), _view("ABC", 12, broker="Rakuten")]
    assert evaluate_alerts(views, alerts, {}).messages == ["ABC: target price 10 reached"] * 2
