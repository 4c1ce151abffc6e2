from datetime import date

import numpy as np
import pytest

from assetlens.data.synthetic_provider import SyntheticDataProvider
from assetlens.errors import InvalidRange, UnknownMetric
from assetlens.metrics import MetricId, decode_risk_regime
from assetlens.models import Asset, EventCategory, SourceType

from conftest import SEEDS, run


def test_window_and_metric_ids(provider):
    assert provider.dates[0].date() == date(2022, 1, 1)
    assert provider.dates[-1].date() == date(2023, 12, 31)
    assert len(provider.dates) == 730
    assert sorted(provider.metric_ids) == sorted(m.value for m in MetricId)


def test_full_series_shape(provider):
    series = run(provider.get_series("btc_price"))
    assert series.metric_id == "btc_price"
    assert series.label == "BTC Price"
    assert series.unit == "USD"
    assert series.asset == Asset.BTC
    assert series.source_type == SourceType.SYNTHETIC
    assert len(series.observations) == len(provider.dates)
    assert series.observations[0].date == date(2022, 1, 1)


def test_series_sub_range_is_inclusive(provider):
    series = run(provider.get_series("eth_price", start_date="2023-03-01", end_date="2023-03-31"))
    assert len(series.observations) == 31
    assert series.observations[0].date == date(2023, 3, 1)
    assert series.observations[-1].date == date(2023, 3, 31)

    full = run(provider.get_series("eth_price"))
    offset = (date(2023, 3, 1) - date(2022, 1, 1)).days
    assert series.values == full.values[offset:offset + 31]


def test_series_accepts_date_objects_and_open_bounds(provider):
    tail = run(provider.get_series("volatility_proxy", start_date=date(2023, 12, 25)))
    assert len(tail.observations) == 7
    head = run(provider.get_series("volatility_proxy", end_date="2022-01-10"))
    assert len(head.observations) == 10


def test_series_outside_window_is_empty(provider):
    series = run(provider.get_series("btc_price", start_date="2030-01-01"))
    assert series.observations == []


def test_reversed_range_rejected_before_metric_lookup(provider):
    with pytest.raises(InvalidRange):
        run(provider.get_series("no_such_metric", start_date="2023-02-01", end_date="2023-01-01"))


def test_malformed_date_rejected(provider):
    with pytest.raises(InvalidRange):
        run(provider.get_series("btc_price", start_date="not-a-date"))
    with pytest.raises(ValueError):
        run(provider.get_events(end_date="2023-13-45"))


def test_unknown_metric_raises_but_metadata_falls_back(provider):
    with pytest.raises(UnknownMetric) as exc:
        run(provider.get_series("no_such_metric"))
    assert exc.value.metric_id == "no_such_metric"
    assert isinstance(exc.value, LookupError)

    with pytest.raises(UnknownMetric):
        run(provider.get_latest("no_such_metric"))

    meta = run(provider.get_metadata("no_such_metric"))
    assert meta.label == "no_such_metric"
    assert meta.unit == ""


def test_latest_is_last_observation(provider):
    for metric_id in ("btc_price", "leverage_ratio_proxy", "crypto_liquidity_stress_index"):
        series = run(provider.get_series(metric_id))
        assert run(provider.get_latest(metric_id)) == series.observations[-1].value


def test_asset_argument_is_accepted(provider):
    a = run(provider.get_latest("eth_price", asset=Asset.ETH))
    b = run(provider.get_latest("eth_price", asset="BTC"))
    assert a == b


def test_risk_regime_labels_match_codes(provider):
    codes = run(provider.get_series("risk_regime")).values
    assert [decode_risk_regime(c) for c in codes] == list(provider.risk_regime_labels)


def test_events_in_window_and_sorted(provider):
    events = run(provider.get_events())
    assert len(events) >= 8
    assert [e.date for e in events] == sorted(e.date for e in events)
    assert all(date(2022, 1, 1) <= e.date <= date(2023, 12, 31) for e in events)


def test_events_filtering(provider):
    all_events = run(provider.get_events())
    liquidity = run(provider.get_events(category=EventCategory.LIQUIDITY))
    assert liquidity == [e for e in all_events if e.category == EventCategory.LIQUIDITY]
    assert run(provider.get_events(category="liquidity")) == liquidity

    first = all_events[0].date
    same_day = run(provider.get_events(start_date=first, end_date=first))
    assert same_day and all(e.date == first for e in same_day)


def test_queries_do_not_mutate_cache(provider):
    before = run(provider.get_series("btc_price")).values
    run(provider.get_series("btc_price", start_date="2023-01-01"))
    run(provider.get_events(category="market"))
    assert run(provider.get_series("btc_price")).values == before


def test_wire_shape(provider):
    payload = run(provider.get_series("stablecoin_total_supply", end_date="2022-01-02")).model_dump(mode="json")
    assert payload["observations"][0]["date"] == "2022-01-01"
    assert payload["frequency"] == "daily"
    assert payload["source_type"] == "synthetic"
    assert payload["asset"] == "STABLES"

    event = run(provider.get_events())[0].model_dump(mode="json")
    assert set(event) == {"event_id", "label", "date", "category", "severity", "description"}


@pytest.mark.parametrize("seed", SEEDS)
def test_seed_reproducible(seed: int):
    a = SyntheticDataProvider("2023-01-01", "2023-06-30", seed=seed)
    b = SyntheticDataProvider("2023-01-01", "2023-06-30", seed=seed)
    assert run(a.get_series("btc_price")).values == run(b.get_series("btc_price")).values
    assert run(a.get_events()) == run(b.get_events())


def test_new_instance_is_new_draw():
    a = SyntheticDataProvider("2023-01-01", "2023-03-31", seed=1)
    b = SyntheticDataProvider("2023-01-01", "2023-03-31", seed=2)
    assert not np.array_equal(run(a.get_series("btc_price")).values, run(b.get_series("btc_price")).values)


def test_window_from_settings(settings):
    from_settings = SyntheticDataProvider(settings=settings)
    explicit = SyntheticDataProvider("2023-01-01", "2023-12-31", seed=42)
    assert from_settings.dates.equals(explicit.dates)
    assert run(from_settings.get_latest("btc_price")) == run(explicit.get_latest("btc_price"))


def test_single_day_window():
    p = SyntheticDataProvider("2024-06-01", "2024-06-01", seed=0)
    series = run(p.get_series("btc_price"))
    assert len(series.observations) == 1
    assert len(p.regimes) == 1
    assert len(run(p.get_events())) == 8


def test_reversed_construction_window_rejected():
    with pytest.raises(InvalidRange):
        SyntheticDataProvider("2024-06-02", "2024-06-01", seed=0)
