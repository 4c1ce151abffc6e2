"""
Data provider factory.

This toolkit ships synthetic data only. To add a real source:
  1. Implement ``DataProvider`` in ``assetlens/data/``
  2. Register it in ``PROVIDERS`` below
  3. Select it with ASSETLENS_PROVIDER
"""
from __future__ import annotations

import logging
from typing import Callable

from assetlens.config import Settings, load_settings
from assetlens.data.open_provider import OpenDataProvider
from assetlens.data.provider import DataProvider
from assetlens.data.synthetic_provider import SyntheticDataProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, Callable[[Settings], DataProvider]] = {
    "synthetic": lambda settings: SyntheticDataProvider(settings=settings),
    "open": lambda settings: OpenDataProvider(),
}


def create_data_provider(kind: str | None = None, settings: Settings | None = None) -> DataProvider:
    """Build a provider; ``kind`` overrides ASSETLENS_PROVIDER."""
    settings = settings or load_settings()
    name = (kind or settings.provider).strip().lower()
    factory = PROVIDERS.get(name)
    if factory is None:
        raise ValueError(f"Unknown provider {name!r}; expected one of {sorted(PROVIDERS)}")
    logger.debug("Creating %s data provider", name)
    return factory(settings)


_provider_instance: DataProvider | None = None


def get_data_provider() -> DataProvider:
    """Process-wide provider, built on first use."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = create_data_provider()
    return _provider_instance


def reset_data_provider() -> None:
    """Drop the process-wide provider; the next call re-generates."""
    global _provider_instance
    _provider_instance = None


__all__ = [
    "DataProvider",
    "OpenDataProvider",
    "PROVIDERS",
    "SyntheticDataProvider",
    "create_data_provider",
    "get_data_provider",
    "reset_data_provider",
]
