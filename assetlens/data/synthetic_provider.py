"""
SyntheticDataProvider - fully implemented provider backed by the synthetic engine.

Everything is generated eagerly in ``__init__``: regimes, every series, then the
event list. Queries only read the cache. A new instance is a new random draw.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np
import pandas as pd

from assetlens.config import EngineConfig, Settings, load_settings
from assetlens.data.provider import DataProvider
from assetlens.errors import UnknownMetric
from assetlens.metrics import MetricId, metadata_for
from assetlens.models import (
    Asset,
    Event,
    EventCategory,
    Frequency,
    Observation,
    RiskRegime,
    SeriesMetadata,
    SourceType,
    TimeSeries,
)
from assetlens.regimes.base import MarketRegime
from assetlens.regimes.process import RegimeProcess
from assetlens.synthetic.events import detect_events
from assetlens.synthetic.generator import build_daily_dates, generate_market
from assetlens.utils.dates import parse_date_bounds
from assetlens.utils.rng import RandomSource

logger = logging.getLogger(__name__)


class SyntheticDataProvider(DataProvider):
    source_type = SourceType.SYNTHETIC

    def __init__(
        self,
        start: Any = None,
        end: Any = None,
        *,
        seed: int | None = None,
        rng: RandomSource | None = None,
        config: EngineConfig | None = None,
        settings: Settings | None = None,
    ):
        """
        Args:
            start: Window start; defaults to the configured window
            end: Window end, inclusive; defaults to the configured window
            seed: Seed for a fresh RandomSource (ignored when ``rng`` is given)
            rng: Injected random source
            config: Engine lookbacks and event guardrails
            settings: Used to resolve a missing window or seed
        """
        if start is None or end is None:
            settings = settings or load_settings()
            default_start, default_end = settings.window()
            start = default_start if start is None else start
            end = default_end if end is None else end
        if seed is None and rng is None and settings is not None:
            seed = settings.seed

        self._config = config or EngineConfig()
        self._rng = rng or RandomSource(seed=seed)

        self._dates = build_daily_dates(start, end)
        self._process = RegimeProcess.generate(self._dates[0], self._dates[-1], self._rng)

        market = generate_market(self._dates, self._process, self._rng, self._config)
        self._cache: dict[MetricId, np.ndarray] = market.as_dict()
        self._risk_labels: tuple[RiskRegime, ...] = market.risk_regime_labels

        self._events: tuple[Event, ...] = tuple(
            detect_events(
                self._dates,
                market.btc_price,
                market.volatility_proxy,
                market.leverage_ratio_proxy,
                market.btc_etf_net_flows,
                market.stablecoin_total_supply,
                self._rng,
                self._config,
            )
        )

        logger.info(
            "Synthetic provider ready: %s..%s, %d days, %d regimes, %d series, %d events",
            self._dates[0].date(),
            self._dates[-1].date(),
            len(self._dates),
            len(self._process),
            len(self._cache),
            len(self._events),
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def dates(self) -> pd.DatetimeIndex:
        return self._dates

    @property
    def regimes(self) -> tuple[MarketRegime, ...]:
        return self._process.regimes

    @property
    def metric_ids(self) -> list[str]:
        return [m.value for m in self._cache]

    @property
    def risk_regime_labels(self) -> tuple[RiskRegime, ...]:
        return self._risk_labels

    def _values(self, metric_id: str) -> np.ndarray:
        key = MetricId.parse(metric_id)
        if key is None or key not in self._cache:
            raise UnknownMetric(metric_id)
        return self._cache[key]

    # ------------------------------------------------------------------
    # DataProvider
    # ------------------------------------------------------------------

    async def get_series(
        self,
        metric_id: str,
        *,
        start_date: Any = None,
        end_date: Any = None,
        asset: Optional[Asset | str] = None,
    ) -> TimeSeries:
        start_ts, end_ts = parse_date_bounds(start_date, end_date)
        values = self._values(metric_id)
        metadata = await self.get_metadata(metric_id)

        # First date >= start, last date <= end
        lo = 0 if start_ts is None else int(self._dates.searchsorted(start_ts, side="left"))
        hi = len(self._dates) if end_ts is None else int(self._dates.searchsorted(end_ts, side="right"))

        observations = [
            Observation(date=d.date(), value=float(v))
            for d, v in zip(self._dates[lo:hi], values[lo:hi])
        ]

        return TimeSeries(
            metric_id=metric_id,
            label=metadata.label or metric_id,
            unit=metadata.unit or "",
            frequency=Frequency.DAILY,
            observations=observations,
            asset=metadata.asset,
            notes=metadata.notes,
            source_type=self.source_type,
        )

    async def get_latest(self, metric_id: str, *, asset: Optional[Asset | str] = None) -> float:
        values = self._values(metric_id)
        return float(values[-1])

    async def get_metadata(self, metric_id: str) -> SeriesMetadata:
        return metadata_for(metric_id)

    async def get_events(
        self,
        *,
        start_date: Any = None,
        end_date: Any = None,
        category: Optional[EventCategory | str] = None,
    ) -> list[Event]:
        start_ts, end_ts = parse_date_bounds(start_date, end_date)
        wanted = category.value if isinstance(category, EventCategory) else category

        filtered = list(self._events)
        if start_ts is not None:
            filtered = [e for e in filtered if e.date >= start_ts.date()]
        if end_ts is not None:
            filtered = [e for e in filtered if e.date <= end_ts.date()]
        if wanted:
            filtered = [e for e in filtered if e.category.value == wanted]
        return filtered
