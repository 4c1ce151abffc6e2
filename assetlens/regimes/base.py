"""
Market regime types and the per-kind parameters of the regime process.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd


class RegimeKind(str, Enum):
    BULL = "bull"
    BEAR = "bear"
    SIDEWAYS = "sideways"


@dataclass(frozen=True)
class MarketRegime:
    """
    One labeled, time-bounded interval of market behavior.

    Attributes:
        start: Inclusive start instant
        end: Inclusive end instant (clipped to the generation window)
        kind: bull / bear / sideways
        volatility: Annualized volatility level, in percent
    """
    start: pd.Timestamp
    end: pd.Timestamp
    kind: RegimeKind
    volatility: float

    def contains(self, ts: pd.Timestamp) -> bool:
        return self.start <= ts <= self.end

    @property
    def duration_days(self) -> float:
        return (self.end - self.start) / pd.Timedelta(days=1)


# Cumulative thresholds on r ~ U[0, 1): first threshold above r wins,
# otherwise the regime persists.
TRANSITION_THRESHOLDS: dict[RegimeKind, list[tuple[float, RegimeKind]]] = {
    RegimeKind.BULL: [(0.10, RegimeKind.BEAR), (0.30, RegimeKind.SIDEWAYS)],
    RegimeKind.BEAR: [(0.15, RegimeKind.BULL), (0.35, RegimeKind.SIDEWAYS)],
    RegimeKind.SIDEWAYS: [(0.40, RegimeKind.BULL), (0.70, RegimeKind.BEAR)],
}

# Durations in days
DURATION_RANGES: dict[RegimeKind, tuple[float, float]] = {
    RegimeKind.BULL: (30.0, 180.0),
    RegimeKind.BEAR: (20.0, 90.0),
    RegimeKind.SIDEWAYS: (15.0, 60.0),
}

# Annualized volatility, percent
VOLATILITY_BANDS: dict[RegimeKind, tuple[float, float]] = {
    RegimeKind.BULL: (40.0, 70.0),
    RegimeKind.BEAR: (60.0, 100.0),
    RegimeKind.SIDEWAYS: (25.0, 50.0),
}


def next_regime_kind(previous: RegimeKind, r: float) -> RegimeKind:
    """Apply the transition table to a uniform draw ``r``."""
    for threshold, kind in TRANSITION_THRESHOLDS[previous]:
        if r < threshold:
            return kind
    return previous
