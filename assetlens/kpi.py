"""
KPI strip: headline cards built from ``DataProvider.get_latest``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from assetlens.data.provider import DataProvider
from assetlens.metrics import MetricId
from assetlens.models import TimeSeries
from assetlens.utils.formatting import calculate_change, fmt_currency, fmt_large_number, fmt_number, fmt_percent

FORMATTERS: dict[str, Callable[[float], str]] = {
    "currency": lambda v: fmt_currency(v, 0),
    "number": lambda v: fmt_number(v, 1),
    "percent": lambda v: fmt_percent(v, 1),
    "large": lambda v: fmt_large_number(v, 2),
}


@dataclass(frozen=True)
class KpiCard:
    label: str
    metric_id: str
    format: str  # currency | number | percent | large
    unit: str = ""


@dataclass(frozen=True)
class KpiValue:
    card: KpiCard
    value: Optional[float]

    @property
    def display(self) -> str:
        if self.value is None:
            return "—"
        text = FORMATTERS.get(self.card.format, str)(self.value)
        return f"{text} {self.card.unit}".strip()


KPI_CARDS: list[KpiCard] = [
    KpiCard("BTC Price", MetricId.BTC_PRICE.value, "currency"),
    KpiCard("Market Cap", MetricId.TOTAL_MARKET_CAP.value, "large", unit="T"),
    KpiCard("Stablecoin Supply", MetricId.STABLECOIN_SUPPLY.value, "large", unit="B"),
    KpiCard("ETF Net Flows (Cum.)", MetricId.ETF_CUMULATIVE_FLOWS.value, "large", unit="B"),
    KpiCard("Leverage Ratio", MetricId.LEVERAGE_RATIO.value, "percent"),
    KpiCard("Liquidity Stress", MetricId.LIQUIDITY_STRESS.value, "number"),
]


async def build_kpi_strip(provider: DataProvider, cards: list[KpiCard] | None = None) -> list[KpiValue]:
    """Latest value for every card; errors propagate to the caller."""
    out: list[KpiValue] = []
    for card in cards or KPI_CARDS:
        out.append(KpiValue(card=card, value=await provider.get_latest(card.metric_id)))
    return out


def series_change(series: TimeSeries) -> tuple[float, float] | None:
    """First-to-last (change, change %) over the series window, or None if empty."""
    if not series.observations:
        return None
    return calculate_change(series.observations[-1].value, series.observations[0].value)
