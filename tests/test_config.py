from datetime import date

import pytest

from assetlens.config import EngineConfig, Settings, load_settings
from assetlens.errors import InvalidRange


def test_defaults():
    s = Settings()
    assert s.provider == "synthetic"
    assert s.history_years == 2
    assert s.seed is None
    assert s.log_level == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ASSETLENS_SEED", "5")
    monkeypatch.setenv("ASSETLENS_PROVIDER", " Open ")
    monkeypatch.setenv("ASSETLENS_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.seed == 5
    assert s.provider == "open"
    assert s.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path):
    # clean_env already chdir'd into tmp_path
    (tmp_path / ".env").write_text("ASSETLENS_HISTORY_YEARS=3\nUNRELATED_KEY=x\n", encoding="utf-8")
    assert load_settings().history_years == 3


def test_window_defaults_to_history_years_ending_today():
    start, end = Settings().window(today=date(2024, 6, 15))
    assert (start, end) == (date(2022, 6, 15), date(2024, 6, 15))


def test_window_leap_day_falls_back():
    start, end = Settings(ASSETLENS_HISTORY_YEARS=1).window(today=date(2024, 2, 29))
    assert start == date(2023, 2, 28)


def test_window_explicit_dates():
    s = Settings(ASSETLENS_START_DATE="2021-03-01", ASSETLENS_END_DATE="2021-12-31")
    assert s.window() == (date(2021, 3, 1), date(2021, 12, 31))


def test_window_start_only_runs_to_today():
    s = Settings(ASSETLENS_START_DATE="2024-01-01")
    assert s.window(today=date(2024, 3, 1)) == (date(2024, 1, 1), date(2024, 3, 1))


def test_window_reversed_rejected():
    s = Settings(ASSETLENS_START_DATE="2024-02-01", ASSETLENS_END_DATE="2024-01-01")
    with pytest.raises(InvalidRange):
        s.window()


def test_window_malformed_rejected():
    with pytest.raises(InvalidRange):
        Settings(ASSETLENS_END_DATE="yesterday").window()


def test_negative_history_rejected():
    with pytest.raises(InvalidRange):
        Settings(ASSETLENS_HISTORY_YEARS=-1).window(today=date(2024, 1, 1))


def test_engine_config_defaults():
    cfg = EngineConfig()
    assert cfg.lookback_days == 30
    assert cfg.volatility_window == 30
    assert cfg.momentum_window == 20
    assert cfg.min_event_spacing_days == 15
    assert cfg.min_event_count == 8
