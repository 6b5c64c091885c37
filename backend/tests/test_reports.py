from __future__ import annotations

import pytest

from portfolio_ledger import Trade, aggregate, reports


def test_reports_bucket_sell_proceeds_by_month_and_year():
    trades = [
        Trade(symbol="ABC", side="BUY", quantity=10, price=100, fee=5, date="2023-12-01"),
        Trade(symbol="ABC", side="SELL", quantity=2, price=120, fee=1, date="2023-12-20"),
        Trade(symbol="ABC", side="SELL", quantity=3, price=130, fee=2, date="2024-01-15"),
        Trade(symbol="XYZ", side="SELL", quantity=1, price=50, fee=0, date="2024-01-31"),
    ]
    result = reports(trades)
    assert result.monthly == {
        "2023-12": pytest.approx(239),
        "2024-01": pytest.approx(388 + 50),
    }
    assert result.yearly == {"2023": pytest.approx(239), "2024": pytest.approx(438)}


def test_reports_differ_from_realized_pnl():
    trades = [
        Trade(symbol="ABC", side="BUY", quantity=10, price=100, date="2024-01-01"),
        Trade(symbol="ABC", side="SELL", quantity=10, price=110, fee=5, date="2024-02-01"),
    ]
    assert reports(trades).monthly == {"2024-02": pytest.approx(1095)}
    assert aggregate(trades)[("ABC", "unassigned")].realized_pnl == pytest.approx(95)


def test_reports_empty_without_sells():
    result = reports([Trade(symbol="ABC", side="BUY", quantity=1, price=1, date="2024-01-01")])
    assert result.monthly == {}
    assert result.yearly == {}
