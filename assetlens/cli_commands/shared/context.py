"""
Per-invocation CLI state: global options and the lazily built provider.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel

from assetlens.config import load_settings
from assetlens.data import create_data_provider
from assetlens.data.provider import DataProvider
from assetlens.data.synthetic_provider import SyntheticDataProvider
from assetlens.errors import AssetLensError

T = TypeVar("T")


@dataclass
class CliState:
    seed: int | None = None
    provider_kind: str | None = None
    _provider: DataProvider | None = field(default=None, repr=False)

    def provider(self) -> DataProvider:
        if self._provider is None:
            settings = load_settings()
            kind = (self.provider_kind or settings.provider).strip().lower()
            if kind == "synthetic" and self.seed is not None:
                self._provider = SyntheticDataProvider(seed=self.seed, settings=settings)
            else:
                self._provider = create_data_provider(kind, settings=settings)
        return self._provider


def state_from(ctx: typer.Context) -> CliState:
    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState()
    return ctx.obj


def run_query(console: Console, awaitable: Awaitable[T]) -> T:
    """Drive one provider coroutine; known failures become a red panel + exit 1."""
    try:
        return asyncio.run(awaitable)
    except AssetLensError as e:
        console.print(Panel(f"[red]{type(e).__name__}[/red]\n\n{e}", title="Error", expand=False))
        raise typer.Exit(code=1)


def build_provider(console: Console, ctx: typer.Context) -> DataProvider:
    try:
        return state_from(ctx).provider()
    except (AssetLensError, ValueError) as e:
        console.print(Panel(f"[red]Failed to build data provider[/red]\n\n{e}", title="Error", expand=False))
        raise typer.Exit(code=1)

