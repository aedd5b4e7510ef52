"""Administrative membership operations: fees, cards, termination, history."""

import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException, Request, status
from libs.common.datetime_utils import Clock
from libs.common.logging import get_logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service import repository
from services.members_service.models import (
    EndReason,
    Member,
    MembershipPeriod,
    MemberStatus,
)
from services.members_service.services.audit import log_action
from services.members_service.services.renewal import membership_start_for_payment
from services.members_service.services.settings import get_renewal_settings
from services.members_service.services.status_resolver import (
    ensure_single_open_period,
    find_last_ended_period,
    find_open_periods,
)

logger = get_logger(__name__)


@dataclass
class MembershipHistory:
    periods: list[MembershipPeriod]
    current_period: Optional[MembershipPeriod]
    total_days: int

    @property
    def total_duration(self) -> str:
        years, rest = divmod(self.total_days, 365)
        months, days = divmod(rest, 30)
        return f"{years} years, {months} months, {days} days"


async def _load_member(
    db: AsyncSession, member_id: uuid.UUID, organization_id: Optional[uuid.UUID]
) -> Member:
    member = await repository.get_member(db, member_id, organization_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )
    return member


async def process_fee_payment(
    db: AsyncSession,
    member_id: uuid.UUID,
    payment_date: date,
    clock: Clock,
    *,
    organization_id: Optional[uuid.UUID] = None,
    performed_by: Optional[uuid.UUID] = None,
    request: Optional[Request] = None,
) -> Member:
    """
    Record a membership fee payment.

    When no period is open a new one is started: on the payment date for a
    first payment or one made before the renewal cutoff, otherwise on January
    1 of the following year.

    A back-dated payment never reaches into an ended period: the new period
    then starts the day after the last one ended.
    """
    if payment_date > clock.now().date():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment date cannot be in the future",
        )

    member = await _load_member(db, member_id, organization_id)
    ensure_single_open_period(member.periods, member.id)

    details = repository.ensure_details(db, member)
    details.fee_payment_year = payment_date.year
    details.fee_payment_date = payment_date

    opened = None
    if not find_open_periods(member.periods):
        renewal = await get_renewal_settings(db, member.organization_id)
        start = membership_start_for_payment(
            payment_date, renewal.cutoff, is_new_member=not member.periods
        )
        last_ended = find_last_ended_period(member.periods)
        if last_ended is not None and start <= last_ended.end_date:
            # Periods never overlap; resume the day after the last one ended
            start = last_ended.end_date + timedelta(days=1)
        opened = repository.create_period(db, member, start)

    log_action(
        db,
        "MEMBERSHIP_FEE_PAYMENT",
        performed_by,
        {
            "fee_payment_year": payment_date.year,
            "fee_payment_date": payment_date.isoformat(),
            "period_opened": opened.start_date.isoformat() if opened else None,
        },
        request=request,
        affected_member=member.id,
        organization_id=member.organization_id,
    )
    await db.commit()

    logger.info(
        "Membership fee for %s recorded for member %s", payment_date.year, member.id
    )
    return await _load_member(db, member.id, organization_id)


async def assign_card_number(
    db: AsyncSession,
    member_id: uuid.UUID,
    card_number: Optional[str],
    *,
    stamp_issued: Optional[bool] = None,
    organization_id: Optional[uuid.UUID] = None,
    performed_by: Optional[uuid.UUID] = None,
    request: Optional[Request] = None,
) -> Member:
    """Assign (or clear) a member's card number; numbers are unique."""
    member = await _load_member(db, member_id, organization_id)

    if card_number:
        holder = await repository.find_member_by_card_number(db, card_number)
        if holder is not None and holder.id != member.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Card number {card_number} is already assigned to another member",
            )
    if stamp_issued and not card_number:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot issue stamp without a card number",
        )

    details = repository.ensure_details(db, member)
    previous = details.card_number
    details.card_number = card_number or None
    if stamp_issued is not None:
        details.card_stamp_issued = stamp_issued

    log_action(
        db,
        "MEMBER_CARD_UPDATED",
        performed_by,
        {"old": previous, "new": details.card_number, "stamp_issued": stamp_issued},
        request=request,
        affected_member=member.id,
        organization_id=member.organization_id,
    )
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Card number {card_number} is already assigned to another member",
        )

    return await _load_member(db, member.id, organization_id)


async def end_membership(
    db: AsyncSession,
    member_id: uuid.UUID,
    reason: EndReason,
    clock: Clock,
    *,
    end_date: Optional[date] = None,
    organization_id: Optional[uuid.UUID] = None,
    performed_by: Optional[uuid.UUID] = None,
    request: Optional[Request] = None,
) -> Member:
    """Close the member's open period and mark them inactive."""
    member = await _load_member(db, member_id, organization_id)
    ensure_single_open_period(member.periods, member.id)

    open_periods = find_open_periods(member.periods)
    if not open_periods:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Member has no open membership period",
        )

    period = open_periods[0]
    today = clock.now().date()
    end_date = end_date or today
    if end_date > today:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date cannot be in the future",
        )
    if end_date < period.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date cannot precede the period's start date",
        )

    old_status = member.status
    repository.close_period(period, end_date, reason)
    repository.update_member_status(
        member, MemberStatus.INACTIVE, bool(member.registration_completed)
    )
    log_action(
        db,
        "MEMBERSHIP_TERMINATED",
        performed_by,
        {
            "old": {"status": old_status.value},
            "new": {"status": MemberStatus.INACTIVE.value},
            "end_date": end_date.isoformat(),
            "end_reason": reason.value,
        },
        request=request,
        affected_member=member.id,
        organization_id=member.organization_id,
    )
    await db.commit()

    logger.info("Membership of %s ended (%s)", member.id, reason.value)
    return await _load_member(db, member.id, organization_id)


async def get_membership_history(
    db: AsyncSession,
    member_id: uuid.UUID,
    clock: Clock,
    *,
    organization_id: Optional[uuid.UUID] = None,
) -> MembershipHistory:
    member = await _load_member(db, member_id, organization_id)
    periods = await repository.get_membership_periods(db, member.id)
    today = clock.now().date()

    total_days = sum(
        max(((p.end_date or today) - p.start_date).days, 0) for p in periods
    )
    current = next((p for p in periods if p.end_date is None), None)
    return MembershipHistory(
        periods=periods, current_period=current, total_days=total_days
    )
