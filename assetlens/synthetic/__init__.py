"""
Synthetic data engine: random source, series generators and event detector.

Usage:
    from assetlens.synthetic import RandomSource, build_daily_dates, generate_market
    rng = RandomSource(seed=42)
    dates = build_daily_dates("2023-01-01", "2024-12-31")
    process = RegimeProcess.generate(dates[0], dates[-1], rng)
    market = generate_market(dates, process, rng)
"""
from assetlens.utils.rng import RandomSource
from assetlens.synthetic.generator import MarketSeries, build_daily_dates, generate_market
from assetlens.synthetic.events import (
    EVENT_CATALOG,
    EVENT_DEFINITIONS,
    EVENT_RULES,
    EventDefinition,
    EventRule,
    ScanWindow,
    backfill_events,
    detect_events,
    first_matching_rule,
    scan_events,
)

__all__ = [
    "EVENT_CATALOG",
    "EVENT_DEFINITIONS",
    "EVENT_RULES",
    "EventDefinition",
    "EventRule",
    "MarketSeries",
    "RandomSource",
    "ScanWindow",
    "backfill_events",
    "build_daily_dates",
    "detect_events",
    "first_matching_rule",
    "generate_market",
    "scan_events",
]
