from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from assetlens.cli_commands.shared.context import build_provider, run_query
from assetlens.cli_commands.shared.display import render_events_table
from assetlens.models import EventCategory


def register(app: typer.Typer) -> None:
    @app.command("events")
    def events_cmd(
        ctx: typer.Context,
        start: Optional[str] = typer.Option(None, "--start", help="Start date YYYY-MM-DD (inclusive)"),
        end: Optional[str] = typer.Option(None, "--end", help="End date YYYY-MM-DD (inclusive)"),
        category: Optional[EventCategory] = typer.Option(None, "--category", "-c", help="Only this category"),
    ):
        """Annotated market events in a window."""
        console = Console()
        provider = build_provider(console, ctx)
        events = run_query(console, provider.get_events(start_date=start, end_date=end, category=category))

        if not events:
            console.print("[yellow]No events in window[/yellow]")
            return
        console.print(render_events_table(events))
        console.print(f"[dim]{len(events)} events[/dim]")
