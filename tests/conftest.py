"""
Pytest configuration and shared fixtures for assetlens tests.

Usage:
    @pytest.fixture functions are automatically available to all tests.
    Import helpers from conftest when needed.
"""
import asyncio
from typing import Any

import pandas as pd
import pytest

from assetlens.config import Settings
from assetlens.data.synthetic_provider import SyntheticDataProvider
from assetlens.regimes.base import MarketRegime, RegimeKind
from assetlens.utils.rng import RandomSource

# Seeds used by the property-style invariant tests
SEEDS = [0, 1, 7, 42, 2024]


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep ASSETLENS_* env vars and any local .env out of the tests."""
    for key in (
        "ASSETLENS_PROVIDER",
        "ASSETLENS_HISTORY_YEARS",
        "ASSETLENS_START_DATE",
        "ASSETLENS_END_DATE",
        "ASSETLENS_SEED",
        "ASSETLENS_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> Settings:
    """Fixed one-year window with a pinned seed."""
    return Settings(
        ASSETLENS_START_DATE="2023-01-01",
        ASSETLENS_END_DATE="2023-12-31",
        ASSETLENS_SEED=42,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def rng() -> RandomSource:
    """Seeded random source."""
    return RandomSource(seed=42)


@pytest.fixture
def daily_dates() -> pd.DatetimeIndex:
    """One year of daily dates."""
    return pd.date_range("2023-01-01", "2023-12-31", freq="D")


@pytest.fixture(scope="session")
def provider() -> SyntheticDataProvider:
    """Two-year synthetic provider shared across the session (read-only)."""
    return SyntheticDataProvider("2022-01-01", "2023-12-31", seed=42)


@pytest.fixture
def small_provider() -> SyntheticDataProvider:
    """Short window, cheap to rebuild per test."""
    return SyntheticDataProvider("2023-01-01", "2023-03-31", seed=7)


# =============================================================================
# Test Data Helpers
# =============================================================================

def make_regime(
    kind: RegimeKind = RegimeKind.BULL,
    start: str = "2024-01-01",
    end: str = "2024-03-01",
    volatility: float = 50.0,
) -> MarketRegime:
    """
    Create a MarketRegime for testing.

    Usage:
        regime = make_regime(RegimeKind.BEAR, volatility=80.0)
    """
    return MarketRegime(
        start=pd.Timestamp(start),
        end=pd.Timestamp(end),
        kind=kind,
        volatility=volatility,
    )


def run(coro) -> Any:
    """Drive a provider coroutine to completion."""
    return asyncio.run(coro)
