from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from assetlens.cli_commands.shared.context import build_provider, run_query
from assetlens.cli_commands.shared.display import render_series_table
from assetlens.metrics import MetricId
from assetlens.utils.formatting import fmt_number
from assetlens.utils.logging import log_event, to_jsonable


def register(app: typer.Typer) -> None:
    @app.command("metrics")
    def metrics_cmd(ctx: typer.Context):
        """List every metric id with its label, unit and latest value."""
        console = Console()
        provider = build_provider(console, ctx)
        metric_ids = [m.value for m in MetricId]

        async def _collect():
            rows = []
            for metric_id in metric_ids:
                meta = await provider.get_metadata(metric_id)
                latest = await provider.get_latest(metric_id)
                rows.append((metric_id, meta.label, meta.unit, latest))
            return rows

        rows = run_query(console, _collect())
        table = Table(show_header=True, header_style="bold cyan", expand=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Label")
        table.add_column("Unit", style="dim")
        table.add_column("Latest", justify="right")
        for metric_id, label, unit, latest in rows:
            table.add_row(metric_id, label, unit, fmt_number(latest, 2))
        console.print(table)

    @app.command("series")
    def series_cmd(
        ctx: typer.Context,
        metric_id: str = typer.Argument(..., help="Metric id, e.g. btc_price"),
        start: Optional[str] = typer.Option(None, "--start", help="Start date YYYY-MM-DD (inclusive)"),
        end: Optional[str] = typer.Option(None, "--end", help="End date YYYY-MM-DD (inclusive)"),
        tail: int = typer.Option(0, "--tail", "-n", help="Only show the last N observations (0 = all)"),
        json_out: bool = typer.Option(False, "--json", help="Machine-readable JSON output"),
    ):
        """Print observations for one metric."""
        console = Console()
        provider = build_provider(console, ctx)
        series = run_query(console, provider.get_series(metric_id, start_date=start, end_date=end))

        if json_out:
            console.print_json(json.dumps(series.model_dump(mode="json")))
            return
        console.print(render_series_table(series, tail=tail or None))

    @app.command("latest")
    def latest_cmd(
        ctx: typer.Context,
        metric_id: str = typer.Argument(..., help="Metric id, e.g. leverage_ratio_proxy"),
    ):
        """Print the most recent value of one metric."""
        console = Console()
        provider = build_provider(console, ctx)
        value = run_query(console, provider.get_latest(metric_id))
        meta = run_query(console, provider.get_metadata(metric_id))
        console.print(f"[bold]{meta.label}[/bold]: {fmt_number(value, 2)} {meta.unit}".rstrip())

    @app.command("metadata")
    def metadata_cmd(
        ctx: typer.Context,
        metric_id: str = typer.Argument(..., help="Metric id"),
    ):
        """Print the descriptor for a metric (unknown ids get a generic one)."""
        console = Console()
        provider = build_provider(console, ctx)
        meta = run_query(console, provider.get_metadata(metric_id))
        log_event(metric_id, meta.model_dump(mode="json"))

    @app.command("export")
    def export_cmd(
        ctx: typer.Context,
        metric_ids: List[str] = typer.Argument(..., help="One or more metric ids"),
        out: Path = typer.Option(..., "--out", "-o", help="Output JSON file"),
        start: Optional[str] = typer.Option(None, "--start", help="Start date YYYY-MM-DD (inclusive)"),
        end: Optional[str] = typer.Option(None, "--end", help="End date YYYY-MM-DD (inclusive)"),
        events: bool = typer.Option(True, "--events/--no-events", help="Include events in the window"),
    ):
        """Write series (and events) for a window to a JSON file."""
        console = Console()
        provider = build_provider(console, ctx)

        async def _collect():
            payload = {"series": [await provider.get_series(m, start_date=start, end_date=end) for m in metric_ids]}
            if events:
                payload["events"] = await provider.get_events(start_date=start, end_date=end)
            return payload

        payload = run_query(console, _collect())
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(to_jsonable(payload), indent=2), encoding="utf-8")
        console.print(f"[green]Wrote {len(metric_ids)} series to {out}[/green]")
