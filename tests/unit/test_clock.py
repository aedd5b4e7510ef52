"""Unit tests for clocks and the per-request mock date."""

from datetime import date, datetime, timezone

import pytest
from libs.common.config import get_settings
from libs.common.datetime_utils import FixedClock, SystemClock, parse_mock_date
from services.members_service.routers._helpers import get_clock


@pytest.fixture
def mock_dates(monkeypatch):
    """Enable X-Mock-Date for one test."""
    monkeypatch.setenv("MOCK_DATE_ENABLED", "true")
    get_settings.cache_clear()
    yield
    monkeypatch.delenv("MOCK_DATE_ENABLED")
    get_settings.cache_clear()


@pytest.mark.unit
def test_fixed_clock_pins_bare_date_to_noon_utc():
    assert FixedClock(date(2025, 1, 2)).now() == datetime(
        2025, 1, 2, 12, 0, tzinfo=timezone.utc
    )


@pytest.mark.unit
def test_parse_mock_date_accepts_dates_and_datetimes():
    assert parse_mock_date("2026-01-15").date() == date(2026, 1, 15)
    assert parse_mock_date("2026-01-15T08:30:00Z").tzinfo is not None
    with pytest.raises(ValueError):
        parse_mock_date("next tuesday")


@pytest.mark.unit
def test_mock_date_header_ignored_when_disabled():
    assert isinstance(get_clock("2030-01-01"), SystemClock)


@pytest.mark.unit
def test_mock_date_header_used_when_enabled(mock_dates):
    clock = get_clock("2030-01-01")
    assert isinstance(clock, FixedClock)
    assert clock.now().year == 2030


@pytest.mark.unit
def test_invalid_mock_date_falls_back_to_system_clock(mock_dates):
    assert isinstance(get_clock("not-a-date"), SystemClock)


@pytest.mark.unit
def test_mock_date_never_honoured_in_production(mock_dates, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()
    assert isinstance(get_clock("2030-01-01"), SystemClock)
