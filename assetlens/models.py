"""
Wire models for series, metadata and events.

Serialized with ``model_dump(mode="json")``: dates become ISO-8601 strings and
enums their string values.
"""
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Asset(str, Enum):
    BTC = "BTC"
    ETH = "ETH"
    TOTAL = "TOTAL"
    STABLES = "STABLES"


class SourceType(str, Enum):
    SYNTHETIC = "synthetic"
    OPEN = "open"


class EventCategory(str, Enum):
    POLICY = "policy"
    MARKET = "market"
    MICROSTRUCTURE = "microstructure"
    REGULATION = "regulation"
    LIQUIDITY = "liquidity"


class RiskRegime(str, Enum):
    RISK_ON = "risk_on"
    NEUTRAL = "neutral"
    RISK_OFF = "risk_off"


class Observation(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    value: float


class SeriesMetadata(BaseModel):
    """Partial series descriptor returned by ``get_metadata``."""
    label: str
    unit: str = ""
    notes: str = ""
    asset: Optional[Asset] = None


class TimeSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric_id: str
    label: str
    unit: str
    frequency: Frequency = Frequency.DAILY
    observations: List[Observation] = Field(default_factory=list)
    asset: Optional[Asset] = None
    notes: Optional[str] = None
    source_type: SourceType = SourceType.SYNTHETIC

    @property
    def values(self) -> list[float]:
        return [o.value for o in self.observations]


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: str
    label: str
    date: dt.date
    category: EventCategory
    severity: int = Field(ge=1, le=5)
    description: str
