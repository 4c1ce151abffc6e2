from datetime import date

from assetlens.kpi import KPI_CARDS, KpiCard, KpiValue, build_kpi_strip, series_change
from assetlens.models import Observation, TimeSeries

from conftest import run


def test_kpi_strip_matches_latest(small_provider):
    strip = run(build_kpi_strip(small_provider))
    assert [k.card for k in strip] == KPI_CARDS
    for k in strip:
        assert k.value == run(small_provider.get_latest(k.card.metric_id))
        assert k.display not in ("", "—")


def test_kpi_labels():
    assert [c.label for c in KPI_CARDS] == [
        "BTC Price",
        "Market Cap",
        "Stablecoin Supply",
        "ETF Net Flows (Cum.)",
        "Leverage Ratio",
        "Liquidity Stress",
    ]


def test_kpi_display_formats():
    assert KpiValue(KpiCard("BTC", "btc_price", "currency"), 43210.4).display == "$43,210"
    assert KpiValue(KpiCard("Cap", "total_crypto_market_cap", "large", unit="T"), 1.5).display == "1.50 T"
    assert KpiValue(KpiCard("Lev", "leverage_ratio_proxy", "percent"), 17.26).display == "17.3%"
    assert KpiValue(KpiCard("Stress", "crypto_liquidity_stress_index", "number"), 42.04).display == "42.0"
    assert KpiValue(KpiCard("Stress", "crypto_liquidity_stress_index", "number"), None).display == "—"


def test_series_change():
    series = TimeSeries(
        metric_id="btc_price",
        label="BTC Price",
        unit="USD",
        observations=[
            Observation(date=date(2024, 1, 1), value=100.0),
            Observation(date=date(2024, 1, 2), value=90.0),
            Observation(date=date(2024, 1, 3), value=120.0),
        ],
    )
    change, pct = series_change(series)
    assert change == 20.0
    assert pct == 20.0


def test_series_change_empty():
    assert series_change(TimeSeries(metric_id="m", label="M", unit="")) is None
