"""Shared helper functions for members service routers."""

from typing import Optional

from fastapi import Header
from libs.common.config import get_settings
from libs.common.datetime_utils import Clock, FixedClock, SystemClock, parse_mock_date
from libs.common.logging import get_logger

logger = get_logger(__name__)


def get_clock(x_mock_date: Optional[str] = Header(None)) -> Clock:
    """
    Clock for the current request.

    Outside production, and only when MOCK_DATE_ENABLED is set, an
    ``X-Mock-Date`` header pins "now" for this request alone.
    """
    settings = get_settings()
    if x_mock_date and settings.mock_date_allowed:
        try:
            clock = FixedClock(parse_mock_date(x_mock_date))
        except ValueError:
            logger.warning("Ignoring invalid X-Mock-Date header: %r", x_mock_date)
        else:
            logger.info("Using mock date %s for this request", clock)
            return clock
    return SystemClock(settings.TIMEZONE)
