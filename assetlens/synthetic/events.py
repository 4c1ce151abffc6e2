"""
Condition-based event detection over generated series.

Events come from a fixed catalog; only their dates are chosen per run. The scan
walks the daily axis once and evaluates ``EVENT_RULES`` in priority order,
emitting at most one event per day and enforcing a minimum spacing between
emissions. ``backfill_events`` then tops the list up from unused catalog
entries so a dashboard always has something to annotate.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
import pandas as pd

from assetlens.config import EngineConfig
from assetlens.models import Event, EventCategory
from assetlens.utils.rng import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventDefinition:
    event_id: str
    label: str
    category: EventCategory
    severity: int
    description: str
    backfill_only: bool = False


EVENT_DEFINITIONS: list[EventDefinition] = [
    EventDefinition(
        event_id="etf_inflow_surge",
        label="ETF Inflow Surge",
        category=EventCategory.MARKET,
        severity=3,
        description="Institutional ETF inflows accelerate, driving sustained buying pressure across spot and derivatives markets.",
    ),
    EventDefinition(
        event_id="leverage_build_up",
        label="Leverage Build-Up",
        category=EventCategory.MICROSTRUCTURE,
        severity=4,
        description="Derivatives open interest and funding rates climb, indicating excessive leverage accumulation in the system.",
    ),
    EventDefinition(
        event_id="forced_deleveraging",
        label="Forced Deleveraging",
        category=EventCategory.LIQUIDITY,
        severity=5,
        description="Cascading liquidations trigger violent deleveraging, widening spreads and fragmenting liquidity across venues.",
    ),
    EventDefinition(
        event_id="stablecoin_supply_jump",
        label="Stablecoin Supply Jump",
        category=EventCategory.LIQUIDITY,
        severity=2,
        description="Rapid stablecoin issuance signals capital inflows and expanding dollar-denominated liquidity rails.",
    ),
    EventDefinition(
        event_id="liquidity_drought",
        label="Liquidity Drought",
        category=EventCategory.LIQUIDITY,
        severity=4,
        description="On-chain volume and active addresses decline sharply, network fees collapse, indicating participant exodus.",
    ),
    EventDefinition(
        event_id="regulatory_shock",
        label="Regulatory Shock",
        category=EventCategory.REGULATION,
        severity=5,
        description="Unexpected regulatory action creates uncertainty, triggering risk-off positioning and capital flight.",
    ),
    EventDefinition(
        event_id="macro_risk_off",
        label="Macro Risk-Off",
        category=EventCategory.POLICY,
        severity=4,
        description="Broader macro risk-off regime compresses crypto correlations to traditional risk assets.",
    ),
    EventDefinition(
        event_id="policy_pivot_rally",
        label="Policy Pivot Rally",
        category=EventCategory.POLICY,
        severity=3,
        description="Central bank policy pivot drives liquidity expansion, benefiting digital assets as duration proxies.",
    ),
    EventDefinition(
        event_id="exchange_liquidity_crisis",
        label="Exchange Liquidity Crisis",
        category=EventCategory.MICROSTRUCTURE,
        severity=5,
        description="Major exchange faces solvency concerns, fragmenting liquidity and spiking basis between venues.",
        backfill_only=True,
    ),
    EventDefinition(
        event_id="institutional_capitulation",
        label="Institutional Capitulation",
        category=EventCategory.MARKET,
        severity=4,
        description="Large-scale institutional redemptions accelerate drawdown, marking potential regime shift.",
        backfill_only=True,
    ),
]

EVENT_CATALOG: dict[str, EventDefinition] = {d.event_id: d for d in EVENT_DEFINITIONS}


def create_event(event_id: str, when) -> Event:
    definition = EVENT_CATALOG.get(event_id)
    if definition is None:
        raise KeyError(f"Event definition not found: {event_id}")
    return Event(
        event_id=definition.event_id,
        label=definition.label,
        date=pd.Timestamp(when).date(),
        category=definition.category,
        severity=definition.severity,
        description=definition.description,
    )


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class ScanWindow:
    """Conditions observed on one eligible scan day."""
    index: int
    price_change_30d: float      # percent
    vol_delta: float             # day-over-day volatility change
    volatility: float
    leverage: float
    trailing_flows_10d: float    # millions USD
    supply_change_30d: float     # billions USD
    days_since_last: float       # inf before the first emission


@dataclass(frozen=True)
class EventRule:
    event_id: str
    condition: Callable[[ScanWindow, RandomSource], bool]
    max_count: int | None = None  # None = unlimited


EVENT_RULES: list[EventRule] = [
    EventRule("etf_inflow_surge", lambda w, rng: w.trailing_flows_10d > 1500, max_count=1),
    EventRule("leverage_build_up", lambda w, rng: w.leverage > 20 and w.vol_delta < 5, max_count=2),
    EventRule(
        "forced_deleveraging",
        lambda w, rng: w.price_change_30d < -15 and w.leverage < 13 and w.days_since_last >= 20,
    ),
    EventRule("stablecoin_supply_jump", lambda w, rng: w.supply_change_30d > 8, max_count=2),
    EventRule(
        "liquidity_drought",
        lambda w, rng: w.price_change_30d < -10 and w.supply_change_30d < -5,
        max_count=2,
    ),
    # Random, low frequency
    EventRule("regulatory_shock", lambda w, rng: rng.random() < 0.002 and w.days_since_last >= 30, max_count=1),
    EventRule("macro_risk_off", lambda w, rng: w.price_change_30d < -20 and w.volatility > 80, max_count=2),
    EventRule("policy_pivot_rally", lambda w, rng: w.price_change_30d > 20 and w.index > 180, max_count=2),
]


def first_matching_rule(
    window: ScanWindow,
    counts: Counter,
    rng: RandomSource,
    rules: Sequence[EventRule] = EVENT_RULES,
) -> EventRule | None:
    """Evaluate rules in priority order; the first that fires wins the day."""
    for rule in rules:
        if rule.max_count is not None and counts[rule.event_id] >= rule.max_count:
            continue
        if rule.condition(window, rng):
            return rule
    return None


# =============================================================================
# Scan & backfill
# =============================================================================

def scan_events(
    dates: Sequence,
    prices: np.ndarray,
    volatility: np.ndarray,
    leverage: np.ndarray,
    etf_flows: np.ndarray,
    stable_supply: np.ndarray,
    rng: RandomSource,
    *,
    lookback: int = 30,
    min_spacing: int = 15,
    rules: Sequence[EventRule] = EVENT_RULES,
) -> list[Event]:
    """Condition-detected events; any two are at least ``min_spacing`` days apart."""
    events: list[Event] = []
    counts: Counter = Counter()
    last_index: int | None = None

    for i in range(lookback, len(dates)):
        if last_index is not None and i - last_index < min_spacing:
            continue

        window = ScanWindow(
            index=i,
            price_change_30d=(prices[i] / prices[i - lookback] - 1) * 100,
            vol_delta=float(volatility[i] - volatility[i - 1]),
            volatility=float(volatility[i]),
            leverage=float(leverage[i]),
            trailing_flows_10d=float(np.sum(etf_flows[max(0, i - 10):i])),
            supply_change_30d=float(stable_supply[i] - stable_supply[i - lookback]),
            days_since_last=math.inf if last_index is None else float(i - last_index),
        )

        rule = first_matching_rule(window, counts, rng, rules)
        if rule is None:
            continue

        events.append(create_event(rule.event_id, dates[i]))
        counts[rule.event_id] += 1
        last_index = i

    return events


def backfill_events(events: Sequence[Event], dates: Sequence, *, min_count: int = 8) -> list[Event]:
    """
    Top up to ``min_count`` events from unused catalog definitions.

    Backfilled events sit at evenly spaced slots across the window and are not
    held to the scan's minimum spacing.
    """
    out = list(events)
    needed = min_count - len(out)
    if needed <= 0 or len(dates) == 0:
        return out

    used = {e.event_id for e in out}
    unused = [d for d in EVENT_DEFINITIONS if d.event_id not in used][:needed]
    spacing = len(dates) / needed
    for k, definition in enumerate(unused):
        idx = min(len(dates) - 1, int(spacing * (k + 0.5)))
        out.append(create_event(definition.event_id, dates[idx]))

    logger.debug("Backfilled %d events (%d detected)", len(unused), len(events))
    return out


def sort_events(events: Sequence[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.date)


def detect_events(
    dates: Sequence,
    prices: np.ndarray,
    volatility: np.ndarray,
    leverage: np.ndarray,
    etf_flows: np.ndarray,
    stable_supply: np.ndarray,
    rng: RandomSource,
    config: EngineConfig | None = None,
) -> list[Event]:
    """Scan, backfill, and sort ascending by date."""
    cfg = config or EngineConfig()
    detected = scan_events(
        dates,
        prices,
        volatility,
        leverage,
        etf_flows,
        stable_supply,
        rng,
        lookback=cfg.lookback_days,
        min_spacing=cfg.min_event_spacing_days,
    )
    return sort_events(backfill_events(detected, dates, min_count=cfg.min_event_count))
