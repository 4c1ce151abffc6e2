from __future__ import annotations

import typer
from rich.console import Console

from assetlens.cli_commands.shared.context import build_provider, run_query
from assetlens.cli_commands.shared.display import render_kpi_panel
from assetlens.kpi import KPI_CARDS, build_kpi_strip, series_change
from assetlens.metrics import MetricId, decode_risk_regime


def register(app: typer.Typer) -> None:
    @app.command("kpis")
    def kpis_cmd(ctx: typer.Context):
        """Headline KPI strip with the current risk regime and stress score."""
        console = Console()
        provider = build_provider(console, ctx)

        async def _collect():
            kpis = await build_kpi_strip(provider)
            changes = {}
            for card in KPI_CARDS:
                change = series_change(await provider.get_series(card.metric_id))
                if change is not None:
                    changes[card.metric_id] = change[1]
            regime_code = await provider.get_latest(MetricId.RISK_REGIME.value)
            stress = await provider.get_latest(MetricId.LIQUIDITY_STRESS.value)
            latest = await provider.get_series(MetricId.BTC_PRICE.value)
            asof = latest.observations[-1].date if latest.observations else None
            return kpis, changes, regime_code, stress, asof

        kpis, changes, regime_code, stress, asof = run_query(console, _collect())
        console.print(render_kpi_panel(
            asof=asof,
            kpis=kpis,
            risk_regime=decode_risk_regime(regime_code).value,
            stress=stress,
            changes=changes,
        ))
