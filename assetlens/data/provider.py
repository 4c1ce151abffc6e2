"""
The single consumer-facing data contract.

UI, formatting and export code talk to a ``DataProvider`` only; regime and
generator internals stay behind it. Methods are coroutines so a consumer can
treat a cache hit and a future network-backed source the same way.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from assetlens.models import Asset, Event, EventCategory, SeriesMetadata, SourceType, TimeSeries


class DataProvider(ABC):
    source_type: SourceType

    @abstractmethod
    async def get_series(
        self,
        metric_id: str,
        *,
        start_date: Any = None,
        end_date: Any = None,
        asset: Optional[Asset | str] = None,
    ) -> TimeSeries:
        """Observations for ``metric_id`` within the inclusive date window."""

    @abstractmethod
    async def get_latest(self, metric_id: str, *, asset: Optional[Asset | str] = None) -> float:
        """Most recent value of ``metric_id``."""

    @abstractmethod
    async def get_metadata(self, metric_id: str) -> SeriesMetadata:
        """Label / unit / notes descriptor for ``metric_id``."""

    @abstractmethod
    async def get_events(
        self,
        *,
        start_date: Any = None,
        end_date: Any = None,
        category: Optional[EventCategory | str] = None,
    ) -> list[Event]:
        """Events within the inclusive window, optionally of one category."""
