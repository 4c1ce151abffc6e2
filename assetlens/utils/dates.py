"""
Date parsing utilities for query bounds and configured windows.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd

from assetlens.errors import InvalidRange


def parse_iso_date(s: str | None) -> date | None:
    """Parse ISO date string (YYYY-MM-DD) to date."""
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except (ValueError, TypeError):
        return None


def to_timestamp(value: Any, *, name: str = "date") -> pd.Timestamp | None:
    """
    Normalize a date bound to a midnight ``pd.Timestamp``.

    Accepts None, ``date``/``datetime``/``Timestamp`` objects, and ISO strings
    (date or full timestamp, with or without ``Z``). Raises InvalidRange on
    anything else.
    """
    if value is None:
        return None

    if isinstance(value, pd.Timestamp):
        ts = value
    elif isinstance(value, (datetime, date)):
        ts = pd.Timestamp(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            ts = pd.Timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError as e:
            raise InvalidRange(f"Malformed {name}: {value!r}") from e
    else:
        raise InvalidRange(f"Malformed {name}: {value!r}")

    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.normalize()


def parse_date_bounds(start: Any, end: Any) -> tuple[pd.Timestamp | None, pd.Timestamp | None]:
    """Parse an optional [start, end] pair, rejecting end before start."""
    start_ts = to_timestamp(start, name="start_date")
    end_ts = to_timestamp(end, name="end_date")
    if start_ts is not None and end_ts is not None and end_ts < start_ts:
        raise InvalidRange(f"end_date {end_ts.date()} is before start_date {start_ts.date()}")
    return start_ts, end_ts


def years_before(d: date, years: int) -> date:
    """Same calendar day ``years`` earlier (Feb 29 falls back to Feb 28)."""
    try:
        return d.replace(year=d.year - years)
    except ValueError:
        return d.replace(year=d.year - years, day=28)
