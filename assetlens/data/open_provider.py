"""
OpenDataProvider - placeholder for keyless, free open data sources
(public exchange / chain explorer endpoints). Every call fails so callers can
fall back to the synthetic provider.
"""
from __future__ import annotations

from typing import Any, Optional

from assetlens.data.provider import DataProvider
from assetlens.errors import ProviderNotImplemented
from assetlens.models import Asset, Event, EventCategory, SeriesMetadata, SourceType, TimeSeries

_MESSAGE = "OpenDataProvider not yet implemented. Use the synthetic provider or implement a specific adapter."


class OpenDataProvider(DataProvider):
    source_type = SourceType.OPEN

    async def get_series(
        self,
        metric_id: str,
        *,
        start_date: Any = None,
        end_date: Any = None,
        asset: Optional[Asset | str] = None,
    ) -> TimeSeries:
        raise ProviderNotImplemented(_MESSAGE)

    async def get_latest(self, metric_id: str, *, asset: Optional[Asset | str] = None) -> float:
        raise ProviderNotImplemented(_MESSAGE)

    async def get_metadata(self, metric_id: str) -> SeriesMetadata:
        raise ProviderNotImplemented(_MESSAGE)

    async def get_events(
        self,
        *,
        start_date: Any = None,
        end_date: Any = None,
        category: Optional[EventCategory | str] = None,
    ) -> list[Event]:
        raise ProviderNotImplemented(_MESSAGE)
