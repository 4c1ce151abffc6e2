from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def to_jsonable(x: Any) -> Any:
    if is_dataclass(x):
        return asdict(x)
    if hasattr(x, "model_dump"):
        return x.model_dump(mode="json")
    if isinstance(x, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [to_jsonable(v) for v in x]
    if isinstance(x, Enum):
        return x.value
    if isinstance(x, (datetime, date)):
        return x.isoformat()
    return x


def log_event(event: str, payload: dict[str, Any]) -> None:
    console.print(f"[bold]{event}[/bold]")
    console.print_json(json.dumps({k: to_jsonable(v) for k, v in payload.items()}, default=str))


def configure_logging(level: str = "WARNING") -> None:
    """Route the ``assetlens`` loggers through a rich handler on stderr."""
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root = logging.getLogger("assetlens")
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.propagate = False
