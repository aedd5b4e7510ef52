"""Organization renewal settings with defaults and a short-lived cache."""

import time
import uuid
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service.models import OrganizationSettings
from services.members_service.services.renewal import RenewalSettings

logger = get_logger(__name__)

# organization_id -> (RenewalSettings, cached_at)
_settings_cache: dict[Optional[uuid.UUID], tuple[RenewalSettings, float]] = {}


def default_renewal_settings() -> RenewalSettings:
    settings = get_settings()
    return RenewalSettings(
        renewal_start_month=settings.DEFAULT_RENEWAL_START_MONTH,
        renewal_start_day=settings.DEFAULT_RENEWAL_START_DAY,
        activity_hours_threshold=settings.DEFAULT_ACTIVITY_HOURS_THRESHOLD,
    )


def _from_row(row: Optional[OrganizationSettings]) -> RenewalSettings:
    defaults = default_renewal_settings()
    if row is None:
        return defaults
    return RenewalSettings(
        renewal_start_month=row.renewal_start_month or defaults.renewal_start_month,
        renewal_start_day=row.renewal_start_day or defaults.renewal_start_day,
        activity_hours_threshold=(
            row.activity_hours_threshold
            if row.activity_hours_threshold is not None
            else defaults.activity_hours_threshold
        ),
    )


async def get_settings_row(
    db: AsyncSession, organization_id: Optional[uuid.UUID]
) -> Optional[OrganizationSettings]:
    if organization_id is None:
        query = select(OrganizationSettings).where(
            OrganizationSettings.organization_id.is_(None)
        )
    else:
        query = select(OrganizationSettings).where(
            OrganizationSettings.organization_id == organization_id
        )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_renewal_settings(
    db: AsyncSession, organization_id: Optional[uuid.UUID] = None
) -> RenewalSettings:
    """
    Renewal cutoff and activity threshold for an organization.

    Unset values fall back to the configured defaults; so does a failed
    lookup, so a settings problem never stops status resolution.
    """
    ttl = get_settings().SETTINGS_CACHE_TTL_SECONDS
    cached = _settings_cache.get(organization_id)
    if cached and time.monotonic() - cached[1] < ttl:
        return cached[0]

    try:
        row = await get_settings_row(db, organization_id)
    except Exception:
        logger.exception(
            "Failed to load renewal settings for organization %s, using defaults",
            organization_id,
        )
        return default_renewal_settings()

    renewal_settings = _from_row(row)
    _settings_cache[organization_id] = (renewal_settings, time.monotonic())
    return renewal_settings


async def update_renewal_settings(
    db: AsyncSession,
    organization_id: Optional[uuid.UUID],
    *,
    renewal_start_month: int,
    renewal_start_day: int,
    activity_hours_threshold: int,
    updated_by: Optional[str] = None,
) -> RenewalSettings:
    """Upsert an organization's settings. Values are validated by the schema."""
    row = await get_settings_row(db, organization_id)
    if row is None:
        row = OrganizationSettings(organization_id=organization_id)
        db.add(row)

    row.renewal_start_month = renewal_start_month
    row.renewal_start_day = renewal_start_day
    row.activity_hours_threshold = activity_hours_threshold
    row.updated_by = updated_by
    await db.commit()

    invalidate_settings_cache(organization_id)
    logger.info(
        "Renewal settings for organization %s set to %02d-%02d, threshold %dh",
        organization_id,
        renewal_start_month,
        renewal_start_day,
        activity_hours_threshold,
    )
    return _from_row(row)


def invalidate_settings_cache(organization_id: Optional[uuid.UUID] = None) -> None:
    _settings_cache.pop(organization_id, None)


def clear_settings_cache() -> None:
    _settings_cache.clear()
