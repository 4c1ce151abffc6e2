from __future__ import annotations

from datetime import date

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from assetlens.errors import InvalidRange
from assetlens.utils.dates import to_timestamp, years_before


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Which DataProvider implementation the factory builds.
    ASSETLENS_PROVIDER: str = "synthetic"  # synthetic|open

    # Generation window. When unset, the window is HISTORY_YEARS ending today.
    ASSETLENS_HISTORY_YEARS: int = 2
    ASSETLENS_START_DATE: str | None = None
    ASSETLENS_END_DATE: str | None = None

    # Fixed seed for reproducible draws; unset means a fresh draw per provider.
    ASSETLENS_SEED: int | None = None
    ASSETLENS_LOG_LEVEL: str = "WARNING"

    @property
    def provider(self) -> str:
        return (self.ASSETLENS_PROVIDER or "synthetic").strip().lower()

    @property
    def history_years(self) -> int:
        return self.ASSETLENS_HISTORY_YEARS

    @property
    def seed(self) -> int | None:
        return self.ASSETLENS_SEED

    @property
    def log_level(self) -> str:
        return (self.ASSETLENS_LOG_LEVEL or "WARNING").strip().upper()

    def window(self, today: date | None = None) -> tuple[date, date]:
        """Resolve the configured generation window. Raises InvalidRange."""
        end_ts = to_timestamp(self.ASSETLENS_END_DATE, name="ASSETLENS_END_DATE")
        end = end_ts.date() if end_ts is not None else (today or date.today())

        start_ts = to_timestamp(self.ASSETLENS_START_DATE, name="ASSETLENS_START_DATE")
        if start_ts is not None:
            start = start_ts.date()
        else:
            if self.history_years < 0:
                raise InvalidRange(f"ASSETLENS_HISTORY_YEARS must be >= 0, got {self.history_years}")
            start = years_before(end, self.history_years)

        if end < start:
            raise InvalidRange(f"Configured window ends ({end}) before it starts ({start})")
        return start, end


class EngineConfig(BaseModel):
    # Lookbacks used by the generators and the event scan.
    lookback_days: int = 30
    volatility_window: int = 30
    momentum_window: int = 20

    # Event scan guardrails
    # - Condition-detected events are at least min_event_spacing_days apart.
    # - Backfill tops the list up to min_event_count from unused catalog entries.
    min_event_spacing_days: int = 15
    min_event_count: int = 8


def load_settings() -> Settings:
    return Settings()
