"""
Uniform rich output for series, events and the KPI strip.
"""
from __future__ import annotations

from datetime import date
from typing import Sequence

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from assetlens.kpi import KpiValue
from assetlens.models import Event, TimeSeries
from assetlens.utils.formatting import fmt_date, fmt_number, fmt_signed_percent, truncate, value_color

SEVERITY_COLORS = {1: "dim", 2: "green", 3: "yellow", 4: "orange3", 5: "red"}


def score_color(score: float) -> str:
    """Return Rich color tag for score value. Higher = more stress (red)."""
    if score < 30:
        return "green"
    if score < 60:
        return "yellow"
    return "red"


def render_score_bar(score: float, width: int = 50) -> str:
    """Render a colored score bar. score 0-100."""
    filled = int(round((score / 100.0) * width))
    filled = max(0, min(width, filled))
    empty = width - filled
    color = score_color(score)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


def render_series_table(series: TimeSeries, tail: int | None = None) -> Table:
    obs = series.observations[-tail:] if tail else series.observations
    title = f"{series.label} ({series.unit})" if series.unit else series.label
    table = Table(title=title, show_header=True, header_style="bold cyan", expand=False)
    table.add_column("Date", style="cyan")
    table.add_column("Value", justify="right")
    for o in obs:
        table.add_row(o.date.isoformat(), fmt_number(o.value, 2))
    return table


def render_events_table(events: Sequence[Event]) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=False)
    table.add_column("Date", style="cyan")
    table.add_column("Event")
    table.add_column("Category", style="dim")
    table.add_column("Sev", justify="right")
    table.add_column("Description", style="dim")
    for e in events:
        color = SEVERITY_COLORS.get(e.severity, "white")
        table.add_row(
            e.date.isoformat(),
            e.label,
            e.category.value,
            f"[{color}]{e.severity}[/{color}]",
            truncate(e.description, 60),
        )
    return table


def render_kpi_panel(
    *,
    asof: date | None,
    kpis: Sequence[KpiValue],
    risk_regime: str,
    stress: float,
    changes: dict[str, float] | None = None,
) -> Panel:
    """Headline cards, current risk regime and a stress score bar."""
    parts: list = []
    parts.append(Text.from_markup(f"As of: {fmt_date(asof)}\n"))
    color = score_color(stress)
    parts.append(Text.from_markup(
        f"[bold]{risk_regime.upper().replace('_', '-')}[/bold]   "
        f"Stress: [{color}]{stress:.0f}/100[/{color}]   "
        f"{render_score_bar(stress)}\n"
    ))

    mt = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    mt.add_column("Metric", style="cyan")
    mt.add_column("Latest", justify="right")
    mt.add_column("Window chg", justify="right")
    for k in kpis:
        chg = (changes or {}).get(k.card.metric_id)
        chg_str = f"[{value_color(chg)}]{fmt_signed_percent(chg)}[/{value_color(chg)}]" if chg is not None else "—"
        mt.add_row(k.card.label, k.display, chg_str)
    parts.append(mt)

    return Panel.fit(Group(*parts), title="Market Overview", border_style="cyan")
