"""
Regime process: a first-order Markov chain over bull/bear/sideways regimes.

The process is drawn once per engine run and covers the generation window
exactly: regimes are contiguous, ordered, and the last one is clipped to the
window end.
"""
from __future__ import annotations

import logging
from bisect import bisect_left
from typing import Iterable, Sequence

import pandas as pd

from assetlens.errors import InvalidRange
from assetlens.regimes.base import (
    DURATION_RANGES,
    VOLATILITY_BANDS,
    MarketRegime,
    RegimeKind,
    next_regime_kind,
)
from assetlens.utils.rng import RandomSource
from assetlens.utils.dates import to_timestamp

logger = logging.getLogger(__name__)


def _select_kind(previous: MarketRegime | None, rng: RandomSource) -> RegimeKind:
    if previous is None:
        return RegimeKind.BULL if rng.random() > 0.5 else RegimeKind.BEAR
    return next_regime_kind(previous.kind, rng.random())


def generate_regimes(start, end, rng: RandomSource) -> list[MarketRegime]:
    """
    Draw an ordered regime list covering ``[start, end]``.

    Args:
        start: Window start (date, datetime, Timestamp or ISO string)
        end: Window end, inclusive
        rng: Shared random source

    Returns:
        Contiguous regimes; ``regimes[0].start == start`` and
        ``regimes[-1].end == end``.
    """
    start_ts = to_timestamp(start, name="start")
    end_ts = to_timestamp(end, name="end")
    if start_ts is None or end_ts is None:
        raise InvalidRange("Regime process needs both a start and an end")
    if end_ts < start_ts:
        raise InvalidRange(f"Regime window ends ({end_ts.date()}) before it starts ({start_ts.date()})")

    regimes: list[MarketRegime] = []
    cursor = start_ts
    while True:
        kind = _select_kind(regimes[-1] if regimes else None, rng)
        lo, hi = DURATION_RANGES[kind]
        duration = pd.Timedelta(days=rng.uniform(lo, hi))
        vol_lo, vol_hi = VOLATILITY_BANDS[kind]
        volatility = rng.uniform(vol_lo, vol_hi)

        regime_end = cursor + duration
        regimes.append(
            MarketRegime(
                start=cursor,
                end=min(regime_end, end_ts),
                kind=kind,
                volatility=volatility,
            )
        )
        cursor = regime_end
        if cursor >= end_ts:
            break

    logger.debug("Generated %d regimes for %s..%s", len(regimes), start_ts.date(), end_ts.date())
    return regimes


class RegimeProcess:
    """Immutable regime sequence with date lookup."""

    def __init__(self, regimes: Sequence[MarketRegime]):
        if not regimes:
            raise ValueError("RegimeProcess needs at least one regime")
        self._regimes = tuple(regimes)
        self._ends = [r.end for r in self._regimes]

    @classmethod
    def generate(cls, start, end, rng: RandomSource) -> "RegimeProcess":
        return cls(generate_regimes(start, end, rng))

    @property
    def regimes(self) -> tuple[MarketRegime, ...]:
        return self._regimes

    @property
    def start(self) -> pd.Timestamp:
        return self._regimes[0].start

    @property
    def end(self) -> pd.Timestamp:
        return self._regimes[-1].end

    def __len__(self) -> int:
        return len(self._regimes)

    def __iter__(self):
        return iter(self._regimes)

    def regime_at(self, when) -> MarketRegime:
        """
        Regime whose inclusive interval contains ``when``.

        A boundary instant shared by two regimes resolves to the earlier one.
        Falls back to the first regime outside the covered window.
        """
        ts = to_timestamp(when, name="date") if not isinstance(when, pd.Timestamp) else when
        # First regime whose end is >= ts
        idx = bisect_left(self._ends, ts)
        if idx < len(self._regimes) and self._regimes[idx].contains(ts):
            return self._regimes[idx]
        return self._regimes[0]

    def align(self, dates: Iterable) -> list[MarketRegime]:
        """Regime for every date of a date axis."""
        return [self.regime_at(d) for d in dates]
