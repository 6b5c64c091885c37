"""Number formatting shared by alert messages and the CSV codec."""

from __future__ import annotations

import math


def format_number(value: float) -> str:
    """Render ``value`` without a trailing ``.0`` when it is integral."""

    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = ["format_number"]
