"""
AssetLens CLI

Primary commands:
- assetlens metrics / series / latest / metadata
- assetlens events
- assetlens kpis
- assetlens export
"""
from __future__ import annotations

from typing import Optional

import typer

from assetlens.cli_commands.shared.context import CliState
from assetlens.config import load_settings
from assetlens.utils.logging import configure_logging

app = typer.Typer(
    add_completion=False,
    help="""AssetLens — synthetic crypto market analytics

\b
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
SERIES
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  assetlens metrics               Every metric + latest value
  assetlens series btc_price      Observations for one metric
  assetlens latest funding_rate_proxy
  assetlens export btc_price eth_price -o out.json

\b
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
OVERVIEW
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  assetlens kpis                  KPI strip + risk regime
  assetlens events -c liquidity   Annotated market events

\b
Run 'assetlens <command> --help' for details.
"""
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the synthetic engine for a reproducible draw"),
    provider: Optional[str] = typer.Option(None, "--provider", help="synthetic | open (default from ASSETLENS_PROVIDER)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    settings = load_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = CliState(seed=seed, provider_kind=provider)


_COMMANDS_REGISTERED = False


def _register_commands() -> None:
    global _COMMANDS_REGISTERED
    if _COMMANDS_REGISTERED:
        return

    from assetlens.cli_commands.events_cmd import register as register_events
    from assetlens.cli_commands.overview_cmd import register as register_overview
    from assetlens.cli_commands.series_cmd import register as register_series

    register_series(app)
    register_events(app)
    register_overview(app)

    _COMMANDS_REGISTERED = True


def main():
    _register_commands()
    app()


# Register on import
_register_commands()


if __name__ == "__main__":
    main()
