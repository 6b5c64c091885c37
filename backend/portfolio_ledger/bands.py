"""Rolling mean / standard deviation bands over a manual price series."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .models import PriceObservation

BAND_WINDOW = 20
BAND_SIGMAS = 3.0


@dataclass(frozen=True)
class Bands:
    upper: float
    lower: float
    mean: float
    std: float


def bands(
    series: Sequence[PriceObservation],
    *,
    window: int = BAND_WINDOW,
    sigmas: float = BAND_SIGMAS,
) -> Optional[Bands]:
    """Return the band over the last ``window`` observations.

    Uses the population variance (divide by N). Returns ``None`` when the
    series is shorter than ``window``.
    """

    if len(series) < window:
        return None

    closes = pd.Series([entry.price for entry in series], dtype="float64").tail(window)
    if closes.nunique(dropna=False) == 1:
        # A flat window collapses the band exactly onto the price.
        mean = float(closes.iloc[0])
        std = 0.0
    else:
        mean = float(closes.mean(skipna=False))
        std = float(np.sqrt(closes.var(ddof=0, skipna=False)))
    return Bands(upper=mean + sigmas * std, lower=mean - sigmas * std, mean=mean, std=std)


__all__ = ["Bands", "bands", "BAND_WINDOW", "BAND_SIGMAS"]
