"""Alert rule evaluation.

Evaluation is not a read-only query: trailing-stop rules ratchet a
high-water mark. :func:`evaluate_alerts` returns the updated configs next to
the messages and callers are expected to persist them after every run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Sequence

from .bands import Bands, bands
from .formatting import format_number
from .models import AlertConfig, PositionView, PriceObservation

logger = logging.getLogger(__name__)


@dataclass
class AlertEvaluation:
    messages: List[str] = field(default_factory=list)
    alerts: Dict[str, AlertConfig] = field(default_factory=dict)


def _is_set(value: Optional[float]) -> bool:
    # Zero thresholds are treated as unset.
    return bool(value)


def evaluate_alert(
    config: AlertConfig,
    current: float,
    band: Optional[Bands],
) -> tuple[List[str], AlertConfig]:
    """Evaluate one config against ``current``; rules fire independently."""

    symbol = config.symbol
    messages: List[str] = []

    if _is_set(config.target_price) and current >= config.target_price:
        messages.append(f"{symbol}: target price {format_number(config.target_price)} reached")

    if _is_set(config.stop_price) and current <= config.stop_price:
        messages.append(f"{symbol}: stop-loss {format_number(config.stop_price)} reached")

    if config.use_three_sigma and band is not None:
        if current >= band.upper:
            messages.append(f"{symbol}: 3σ upper band ({band.upper:.2f}) reached")
        if current <= band.lower:
            messages.append(f"{symbol}: 3σ lower band ({band.lower:.2f}) reached")

    if _is_set(config.trailing_percent) and current > 0:
        highest = max(config.highest_price or 0.0, current)
        trailing_stop = highest * (1 - config.trailing_percent / 100)
        config = replace(config, highest_price=highest, trailing_stop=trailing_stop)
        if current <= trailing_stop:
            messages.append(f"{symbol}: trailing stop ({trailing_stop:.2f}) reached")

    return messages, config


def evaluate_alerts(
    positions: Sequence[PositionView],
    alerts: Mapping[str, AlertConfig],
    prices: Mapping[str, Sequence[PriceObservation]],
) -> AlertEvaluation:
    """Evaluate every position against its symbol's alert config.

    Positions without a config are skipped. A symbol held at several brokers
    is evaluated once per position, each pass starting from the config the
    previous pass produced.
    """

    result = AlertEvaluation(alerts=dict(alerts))
    band_cache: Dict[str, Optional[Bands]] = {}

    for position in positions:
        config = result.alerts.get(position.symbol)
        if config is None:
            continue

        band = None
        if config.use_three_sigma:
            if position.symbol not in band_cache:
                band_cache[position.symbol] = bands(prices.get(position.symbol, []))
            band = band_cache[position.symbol]

        messages, updated = evaluate_alert(config, position.current_price, band)
        result.alerts[position.symbol] = updated
        result.messages.extend(messages)

    if result.messages:
        logger.info("Alert evaluation produced %d message(s)", len(result.messages))
    return result


__all__ = ["AlertEvaluation", "evaluate_alert", "evaluate_alerts"]
