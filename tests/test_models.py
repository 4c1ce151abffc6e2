from datetime import date

import pytest
from pydantic import ValidationError

from assetlens.metrics import METRIC_METADATA, MetricId, decode_risk_regime, metadata_for
from assetlens.models import Event, EventCategory, Observation, RiskRegime, TimeSeries


def test_every_metric_has_metadata():
    assert set(METRIC_METADATA) == set(MetricId)
    for meta in METRIC_METADATA.values():
        assert meta.label


def test_metric_id_parse():
    assert MetricId.parse("btc_price") is MetricId.BTC_PRICE
    assert MetricId.parse("BTC_PRICE") is None
    assert MetricId.parse("") is None


def test_metadata_fallback_for_unknown_id():
    meta = metadata_for("mystery")
    assert (meta.label, meta.unit, meta.notes, meta.asset) == ("mystery", "", "", None)


def test_metadata_copies_are_independent():
    a = metadata_for("btc_price")
    a.label = "changed"
    assert metadata_for("btc_price").label == "BTC Price"


@pytest.mark.parametrize(
    "code,expected",
    [(1.0, RiskRegime.RISK_ON), (0.0, RiskRegime.NEUTRAL), (-1.0, RiskRegime.RISK_OFF)],
)
def test_decode_risk_regime(code, expected):
    assert decode_risk_regime(code) == expected


def test_event_severity_bounds():
    kwargs = dict(
        event_id="x", label="X", date=date(2024, 1, 1), category=EventCategory.MARKET, description=""
    )
    assert Event(severity=1, **kwargs).severity == 1
    with pytest.raises(ValidationError):
        Event(severity=6, **kwargs)
    with pytest.raises(ValidationError):
        Event(severity=0, **kwargs)


def test_series_is_frozen():
    series = TimeSeries(metric_id="m", label="M", unit="", observations=[Observation(date=date(2024, 1, 1), value=1.0)])
    with pytest.raises(ValidationError):
        series.label = "other"
    assert series.values == [1.0]


def test_series_json_shape():
    series = TimeSeries(
        metric_id="m",
        label="M",
        unit="USD",
        observations=[Observation(date=date(2024, 1, 1), value=1.5)],
    )
    payload = series.model_dump(mode="json")
    assert payload["observations"] == [{"date": "2024-01-01", "value": 1.5}]
    assert payload["frequency"] == "daily"
    assert payload["source_type"] == "synthetic"
    assert payload["asset"] is None
