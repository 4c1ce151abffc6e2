from collections import Counter
from datetime import date

import numpy as np
import pandas as pd
import pytest

from assetlens.models import EventCategory
from assetlens.regimes import RegimeProcess
from assetlens.synthetic.events import (
    EVENT_CATALOG,
    EVENT_DEFINITIONS,
    EVENT_RULES,
    ScanWindow,
    backfill_events,
    create_event,
    detect_events,
    first_matching_rule,
    scan_events,
    sort_events,
)
from assetlens.synthetic.generator import build_daily_dates, generate_market
from assetlens.utils.rng import RandomSource

from conftest import SEEDS


class FixedRandom:
    """Stand-in random source returning a constant draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def _window(**overrides) -> ScanWindow:
    base = dict(
        index=100,
        price_change_30d=0.0,
        vol_delta=0.0,
        volatility=50.0,
        leverage=15.0,
        trailing_flows_10d=0.0,
        supply_change_30d=0.0,
        days_since_last=float("inf"),
    )
    base.update(overrides)
    return ScanWindow(**base)


def _flat_inputs(n: int = 100, *, leverage: float = 15.0, flows: float = 0.0):
    dates = pd.date_range("2024-01-01", periods=n, freq="D")
    return dict(
        dates=dates,
        prices=np.full(n, 40_000.0),
        volatility=np.full(n, 50.0),
        leverage=np.full(n, leverage),
        etf_flows=np.full(n, flows),
        stable_supply=np.full(n, 120.0),
    )


# =============================================================================
# Catalog
# =============================================================================

def test_catalog_ids_unique():
    ids = [d.event_id for d in EVENT_DEFINITIONS]
    assert len(ids) == len(set(ids)) == 10
    assert set(EVENT_CATALOG) == set(ids)


def test_every_rule_references_catalog():
    for rule in EVENT_RULES:
        assert rule.event_id in EVENT_CATALOG


def test_create_event_copies_definition():
    event = create_event("forced_deleveraging", pd.Timestamp("2024-03-05"))
    assert event.date == date(2024, 3, 5)
    assert event.category == EventCategory.LIQUIDITY
    assert event.severity == 5
    assert event.label == "Forced Deleveraging"


def test_create_event_unknown_id():
    with pytest.raises(KeyError):
        create_event("alien_invasion", "2024-01-01")


# =============================================================================
# Rule priority
# =============================================================================

def test_first_rule_wins():
    window = _window(trailing_flows_10d=2000.0, leverage=25.0)
    rule = first_matching_rule(window, Counter(), FixedRandom(0.5))
    assert rule.event_id == "etf_inflow_surge"


def test_exhausted_rule_is_skipped():
    window = _window(trailing_flows_10d=2000.0, leverage=25.0)
    rule = first_matching_rule(window, Counter({"etf_inflow_surge": 1}), FixedRandom(0.5))
    assert rule.event_id == "leverage_build_up"


def test_forced_deleveraging_needs_gap_since_last_event():
    window = _window(price_change_30d=-20.0, leverage=12.0, days_since_last=15.0)
    assert first_matching_rule(window, Counter(), FixedRandom(0.5)) is None

    window = _window(price_change_30d=-20.0, leverage=12.0, days_since_last=20.0)
    assert first_matching_rule(window, Counter(), FixedRandom(0.5)).event_id == "forced_deleveraging"


def test_regulatory_shock_is_random():
    assert first_matching_rule(_window(), Counter(), FixedRandom(0.001)).event_id == "regulatory_shock"
    assert first_matching_rule(_window(), Counter(), FixedRandom(0.5)) is None
    assert first_matching_rule(_window(days_since_last=29.0), Counter(), FixedRandom(0.001)) is None


def test_policy_pivot_only_late_in_window():
    assert first_matching_rule(_window(price_change_30d=25.0, index=150), Counter(), FixedRandom(0.5)) is None
    rule = first_matching_rule(_window(price_change_30d=25.0, index=181), Counter(), FixedRandom(0.5))
    assert rule.event_id == "policy_pivot_rally"


# =============================================================================
# Scan
# =============================================================================

def test_scan_respects_spacing_and_max_count():
    inputs = _flat_inputs(leverage=25.0)
    events = scan_events(**inputs, rng=FixedRandom(0.5))
    assert [e.event_id for e in events] == ["leverage_build_up", "leverage_build_up"]
    assert [e.date for e in events] == [date(2024, 1, 31), date(2024, 2, 15)]


def test_scan_priority_across_days():
    inputs = _flat_inputs(leverage=25.0, flows=200.0)
    events = scan_events(**inputs, rng=FixedRandom(0.5))
    assert [e.event_id for e in events] == ["etf_inflow_surge", "leverage_build_up", "leverage_build_up"]
    gaps = [(b.date - a.date).days for a, b in zip(events, events[1:])]
    assert gaps == [15, 15]


def test_scan_window_too_short_for_lookback():
    inputs = _flat_inputs(n=20, leverage=25.0)
    assert scan_events(**inputs, rng=FixedRandom(0.5)) == []


@pytest.mark.parametrize("seed", SEEDS)
def test_detected_events_spaced(seed: int):
    rng = RandomSource(seed)
    dates = build_daily_dates("2022-01-01", "2023-12-31")
    process = RegimeProcess.generate(dates[0], dates[-1], rng)
    m = generate_market(dates, process, rng)
    events = scan_events(
        dates, m.btc_price, m.volatility_proxy, m.leverage_ratio_proxy,
        m.btc_etf_net_flows, m.stablecoin_total_supply, rng,
    )
    for a, b in zip(events, events[1:]):
        assert (b.date - a.date).days >= 15


# =============================================================================
# Backfill & detect
# =============================================================================

def test_backfill_from_empty_uses_catalog_order_and_centered_slots():
    dates = pd.date_range("2024-01-01", periods=100, freq="D")
    events = backfill_events([], dates, min_count=8)
    assert [e.event_id for e in events] == [d.event_id for d in EVENT_DEFINITIONS[:8]]
    expected_idx = [6, 18, 31, 43, 56, 68, 81, 93]
    assert [e.date for e in events] == [dates[i].date() for i in expected_idx]


def test_backfill_skips_used_definitions():
    dates = pd.date_range("2024-01-01", periods=100, freq="D")
    detected = [create_event("etf_inflow_surge", dates[40]), create_event("leverage_build_up", dates[60])]
    events = backfill_events(detected, dates, min_count=8)
    assert len(events) == 8
    assert events[:2] == detected
    added = [e.event_id for e in events[2:]]
    assert "etf_inflow_surge" not in added
    assert "leverage_build_up" not in added
    assert added[0] == "forced_deleveraging"


def test_backfill_noop_when_enough():
    dates = pd.date_range("2024-01-01", periods=10, freq="D")
    detected = [create_event("regulatory_shock", dates[i]) for i in range(8)]
    assert backfill_events(detected, dates, min_count=8) == detected


def test_backfill_single_day_window():
    dates = pd.date_range("2024-01-01", periods=1, freq="D")
    events = backfill_events([], dates, min_count=8)
    assert len(events) == 8
    assert {e.date for e in events} == {date(2024, 1, 1)}


def test_sort_events_ascending():
    a = create_event("macro_risk_off", "2024-05-01")
    b = create_event("regulatory_shock", "2024-01-01")
    c = create_event("policy_pivot_rally", "2024-03-01")
    assert sort_events([a, b, c]) == [b, c, a]


@pytest.mark.parametrize("seed", SEEDS)
def test_detect_events_minimum_and_sorted(seed: int):
    rng = RandomSource(seed)
    dates = build_daily_dates("2023-01-01", "2023-12-31")
    process = RegimeProcess.generate(dates[0], dates[-1], rng)
    m = generate_market(dates, process, rng)
    events = detect_events(
        dates, m.btc_price, m.volatility_proxy, m.leverage_ratio_proxy,
        m.btc_etf_net_flows, m.stablecoin_total_supply, rng,
    )
    assert len(events) >= 8
    assert [e.date for e in events] == sorted(e.date for e in events)
    for e in events:
        definition = EVENT_CATALOG[e.event_id]
        assert e.category == definition.category
        assert e.severity == definition.severity
        assert dates[0].date() <= e.date <= dates[-1].date()
