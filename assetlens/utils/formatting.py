"""
Display formatting utilities for CLI output and KPI cards.

Provides consistent formatting for:
- Numbers, percentages and currency
- Large values with K/M/B/T suffixes
- Period-over-period change
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional


# ============================================================================
# Number Formatting
# ============================================================================

def fmt_number(x: Optional[float], decimals: int = 2) -> str:
    """Format with comma separators and fixed decimals, or 'n/a'."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    return f"{float(x):,.{decimals}f}"


def fmt_percent(x: Optional[float], decimals: int = 2) -> str:
    """Format a value already expressed in percent (5.0 -> '5.00%')."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    return f"{fmt_number(x, decimals)}%"


def fmt_signed_percent(x: Optional[float], decimals: int = 1) -> str:
    """Format as signed percentage with + prefix for positives."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    return f"{float(x):+,.{decimals}f}%"


# ============================================================================
# Currency Formatting
# ============================================================================

def fmt_currency(x: Optional[float], decimals: int = 2) -> str:
    """Format as USD currency."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    v = float(x)
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.{decimals}f}"


def fmt_large_number(x: Optional[float], decimals: int = 2) -> str:
    """Format large values with K/M/B/T suffixes."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"

    v = float(x)
    sign = "-" if v < 0 else ""
    a = abs(v)
    if a >= 1e12:
        return f"{sign}{fmt_number(a / 1e12, decimals)}T"
    elif a >= 1e9:
        return f"{sign}{fmt_number(a / 1e9, decimals)}B"
    elif a >= 1e6:
        return f"{sign}{fmt_number(a / 1e6, decimals)}M"
    elif a >= 1e3:
        return f"{sign}{fmt_number(a / 1e3, decimals)}K"
    return f"{sign}{fmt_number(a, decimals)}"


def fmt_date(d: date | datetime | str | None) -> str:
    """Format as 'Jan 5, 2024'."""
    if d is None:
        return "N/A"
    if isinstance(d, str):
        d = datetime.fromisoformat(d.replace("Z", "+00:00"))
    return f"{d:%b} {d.day}, {d.year}"


# ============================================================================
# Change
# ============================================================================

def calculate_change(current: float, previous: float) -> tuple[float, float]:
    """Return (absolute change, percent change); percent is 0 when previous is 0."""
    change = current - previous
    change_pct = (change / previous) * 100 if previous != 0 else 0.0
    return change, change_pct


def value_color(x: float) -> str:
    """Rich color for a signed value."""
    if x > 0:
        return "green"
    if x < 0:
        return "red"
    return "dim"


# ============================================================================
# Table Helpers
# ============================================================================

def truncate(s: str, max_len: int = 20) -> str:
    """Truncate string with ellipsis if needed."""
    if len(s) <= max_len:
        return s
    return s[:max_len - 3] + "..."
