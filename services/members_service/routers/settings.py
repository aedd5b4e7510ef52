"""Admin settings router - organization renewal settings."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service.schemas import (
    RenewalSettingsResponse,
    RenewalSettingsUpdate,
)
from services.members_service.services import settings as settings_service

router = APIRouter(prefix="/admin/settings", tags=["admin-settings"])


@router.get("/renewal", response_model=RenewalSettingsResponse)
async def get_renewal_settings(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Renewal cutoff and activity threshold, defaults filled in."""
    org_id = current_user.organization_id
    effective = await settings_service.get_renewal_settings(db, org_id)
    row = await settings_service.get_settings_row(db, org_id)
    return RenewalSettingsResponse(
        renewal_start_month=effective.renewal_start_month,
        renewal_start_day=effective.renewal_start_day,
        activity_hours_threshold=effective.activity_hours_threshold,
        updated_by=row.updated_by if row else None,
        updated_at=row.updated_at if row else None,
    )


@router.put("/renewal", response_model=RenewalSettingsResponse)
async def update_renewal_settings(
    payload: RenewalSettingsUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    updated = await settings_service.update_renewal_settings(
        db,
        current_user.organization_id,
        renewal_start_month=payload.renewal_start_month,
        renewal_start_day=payload.renewal_start_day,
        activity_hours_threshold=payload.activity_hours_threshold,
        updated_by=current_user.user_id,
    )
    return RenewalSettingsResponse(
        renewal_start_month=updated.renewal_start_month,
        renewal_start_day=updated.renewal_start_day,
        activity_hours_threshold=updated.activity_hours_threshold,
        updated_by=current_user.user_id,
    )
