"""
Market regime process.

Usage:
    from assetlens.regimes import RegimeProcess
    process = RegimeProcess.generate("2023-01-01", "2024-12-31", RandomSource(seed=7))
    process.regime_at("2024-03-01").kind
"""
from assetlens.regimes.base import (
    DURATION_RANGES,
    TRANSITION_THRESHOLDS,
    VOLATILITY_BANDS,
    MarketRegime,
    RegimeKind,
    next_regime_kind,
)
from assetlens.regimes.process import RegimeProcess, generate_regimes

__all__ = [
    "DURATION_RANGES",
    "TRANSITION_THRESHOLDS",
    "VOLATILITY_BANDS",
    "MarketRegime",
    "RegimeKind",
    "RegimeProcess",
    "generate_regimes",
    "next_regime_kind",
]
