"""Admin membership router - fee payments, cards, termination and history."""

import uuid

from fastapi import APIRouter, Depends, Request
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import Clock
from libs.db.session import get_async_db
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service.routers._helpers import get_clock
from services.members_service.schemas import (
    CardUpdateRequest,
    FeePaymentRequest,
    MemberMembershipResponse,
    MembershipHistoryResponse,
    TerminateMembershipRequest,
)
from services.members_service.services import membership as membership_service

router = APIRouter(prefix="/admin/members", tags=["admin-membership"])


@router.post("/{member_id}/fee-payment", response_model=MemberMembershipResponse)
async def record_fee_payment(
    member_id: uuid.UUID,
    payload: FeePaymentRequest,
    request: Request,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
):
    """Record a membership fee payment (admin only)."""
    return await membership_service.process_fee_payment(
        db,
        member_id,
        payload.payment_date,
        clock,
        organization_id=current_user.organization_id,
        performed_by=current_user.member_id,
        request=request,
    )


@router.put("/{member_id}/card", response_model=MemberMembershipResponse)
async def update_card(
    member_id: uuid.UUID,
    payload: CardUpdateRequest,
    request: Request,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Assign a membership card number (admin only)."""
    return await membership_service.assign_card_number(
        db,
        member_id,
        payload.card_number,
        stamp_issued=payload.stamp_issued,
        organization_id=current_user.organization_id,
        performed_by=current_user.member_id,
        request=request,
    )


@router.post("/{member_id}/terminate", response_model=MemberMembershipResponse)
async def terminate_membership(
    member_id: uuid.UUID,
    payload: TerminateMembershipRequest,
    request: Request,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
):
    """End a membership (admin only)."""
    return await membership_service.end_membership(
        db,
        member_id,
        payload.reason,
        clock,
        end_date=payload.end_date,
        organization_id=current_user.organization_id,
        performed_by=current_user.member_id,
        request=request,
    )


@router.get("/{member_id}/membership", response_model=MembershipHistoryResponse)
async def get_membership_history(
    member_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    clock: Clock = Depends(get_clock),
):
    history = await membership_service.get_membership_history(
        db, member_id, clock, organization_id=current_user.organization_id
    )
    return MembershipHistoryResponse.model_validate(history)
