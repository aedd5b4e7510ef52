"""Admin status router - reconciliation and resolved member status."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import Clock
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service import repository
from services.members_service.models import MemberStatus
from services.members_service.routers._helpers import get_clock
from services.members_service.schemas import (
    ResolvedStatusResponse,
    SyncMemberStatusesResponse,
)
from services.members_service.services.activity import (
    activity_status_for,
    minutes_to_hours,
)
from services.members_service.services.audit import client_ip
from services.members_service.services.settings import get_renewal_settings
from services.members_service.services.status_resolver import (
    determine_fee_status,
    resolve_membership_status,
)
from services.members_service.services.status_sync import MemberStatusSync

router = APIRouter(prefix="/admin/status", tags=["admin-status"])
logger = get_logger(__name__)


@router.post("/sync-member-statuses", response_model=SyncMemberStatusesResponse)
async def sync_member_statuses(
    request: Request,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
):
    """Reconcile stored statuses for the caller's organization (admin only)."""
    logger.info(
        "Member status sync requested by %s (organization=%s)",
        current_user.user_id,
        current_user.organization_id,
    )
    sync = MemberStatusSync(
        db,
        clock,
        performed_by=current_user.member_id,
        ip_address=client_ip(request),
    )
    result = await sync.run_sync(current_user.organization_id)
    body = SyncMemberStatusesResponse.model_validate(result)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(mode="json", by_alias=True),
        )
    return body


@router.get("/members/{member_id}", response_model=ResolvedStatusResponse)
async def get_resolved_status(
    member_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
):
    """Freshly resolved status next to the stored one (admin only)."""
    member = await repository.get_member(db, member_id, current_user.organization_id)
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )

    settings = await get_renewal_settings(db, member.organization_id)
    detailed = resolve_membership_status(
        member.periods,
        member.details,
        settings,
        clock,
        member_created_at=member.created_at,
    )
    minutes = member.activity_hours or 0
    hours = 0.0 if detailed.status == MemberStatus.INACTIVE else minutes_to_hours(minutes)

    return ResolvedStatusResponse(
        member_id=member.id,
        status=detailed.status,
        reason=detailed.reason,
        stored_status=member.status,
        is_stale=detailed.status != member.status,
        activity_status=activity_status_for(
            detailed.status, minutes, settings.activity_hours_threshold
        ),
        activity_hours=hours,
        fee_status=determine_fee_status(
            member.details.fee_payment_year if member.details else None,
            clock.now().year,
        ),
        effective_year=detailed.years.effective_year if detailed.years else None,
        expiry_year=detailed.years.expiry_year if detailed.years else None,
        end_date=detailed.end_date,
        end_reason=detailed.end_reason,
    )
