"""Member, fee record and period persistence.

One access path per entity; the status sync, the membership service and the
routers all go through these helpers.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import and_, exists, not_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from services.members_service.models import (
    ELEVATED_ROLES,
    EndReason,
    Member,
    MemberRole,
    MembershipDetails,
    MembershipPeriod,
    MemberStatus,
)


def member_eager_load_options():
    """Return selectinload options for all Member relationships."""
    return [selectinload(Member.details), selectinload(Member.periods)]


def _open_period_exists():
    return exists().where(
        MembershipPeriod.member_id == Member.id,
        MembershipPeriod.end_date.is_(None),
    )


def _any_period_exists():
    return exists().where(MembershipPeriod.member_id == Member.id)


def _scoped(query, organization_id: Optional[uuid.UUID]):
    if organization_id is not None:
        query = query.where(Member.organization_id == organization_id)
    return query


async def find_members_by_status_and_card(
    db: AsyncSession, organization_id: Optional[uuid.UUID] = None
) -> list[uuid.UUID]:
    """
    Members holding a card whose stored status lags behind registration.

    Superusers are left alone, as are former members (periods on record but
    none open): their card stays with them after termination.
    """
    query = (
        select(Member.id)
        .join(MembershipDetails, MembershipDetails.member_id == Member.id)
        .where(
            MembershipDetails.card_number.is_not(None),
            MembershipDetails.card_number != "",
            (Member.status != MemberStatus.REGISTERED)
            | Member.registration_completed.is_not(True),
            Member.role != MemberRole.SUPERUSER,
            not_(and_(_any_period_exists(), not_(_open_period_exists()))),
        )
        .order_by(Member.created_at)
    )
    result = await db.execute(_scoped(query, organization_id))
    return list(result.scalars().all())


async def find_lapse_candidates(
    db: AsyncSession, organization_id: Optional[uuid.UUID] = None
) -> list[uuid.UUID]:
    """Registered, non-operator members with an open period."""
    query = (
        select(Member.id)
        .where(
            Member.status == MemberStatus.REGISTERED,
            Member.role.not_in(ELEVATED_ROLES),
            _open_period_exists(),
        )
        .order_by(Member.created_at)
    )
    result = await db.execute(_scoped(query, organization_id))
    return list(result.scalars().all())


async def get_member(
    db: AsyncSession,
    member_id: uuid.UUID,
    organization_id: Optional[uuid.UUID] = None,
) -> Optional[Member]:
    """Load a member with details and periods, refreshing any stale identity."""
    query = (
        select(Member)
        .where(Member.id == member_id)
        .options(*member_eager_load_options())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(_scoped(query, organization_id))
    return result.scalar_one_or_none()


async def get_member_organization_id(
    db: AsyncSession, member_id: uuid.UUID
) -> Optional[uuid.UUID]:
    result = await db.execute(
        select(Member.organization_id).where(Member.id == member_id)
    )
    return result.scalar_one_or_none()


async def find_open_periods_by_member(
    db: AsyncSession, member_id: uuid.UUID
) -> list[MembershipPeriod]:
    result = await db.execute(
        select(MembershipPeriod)
        .where(
            MembershipPeriod.member_id == member_id,
            MembershipPeriod.end_date.is_(None),
        )
        .order_by(MembershipPeriod.start_date)
    )
    return list(result.scalars().all())


async def get_membership_periods(
    db: AsyncSession, member_id: uuid.UUID
) -> list[MembershipPeriod]:
    result = await db.execute(
        select(MembershipPeriod)
        .where(MembershipPeriod.member_id == member_id)
        .order_by(MembershipPeriod.start_date.desc())
    )
    return list(result.scalars().all())


async def find_member_by_card_number(
    db: AsyncSession, card_number: str
) -> Optional[Member]:
    result = await db.execute(
        select(Member)
        .join(MembershipDetails, MembershipDetails.member_id == Member.id)
        .where(MembershipDetails.card_number == card_number)
    )
    return result.scalar_one_or_none()


def update_member_status(
    member: Member, status: MemberStatus, registration_completed: bool
) -> None:
    member.status = status
    member.registration_completed = registration_completed


def close_period(
    period: MembershipPeriod, end_date: date, reason: EndReason
) -> None:
    period.end_date = end_date
    period.end_reason = reason


def create_period(
    db: AsyncSession, member: Member, start_date: date
) -> MembershipPeriod:
    period = MembershipPeriod(member_id=member.id, start_date=start_date)
    db.add(period)
    member.periods.append(period)
    return period


def ensure_details(db: AsyncSession, member: Member) -> MembershipDetails:
    """Return the member's fee record, creating an empty one if missing."""
    if member.details is None:
        member.details = MembershipDetails(member_id=member.id)
        db.add(member.details)
    return member.details
