"""
Detailed membership status derived from periods, fee record and settings.

Pure functions with no database dependencies. The stored ``Member.status``
is only a cache of ``resolve_membership_status``; read paths that need a
correct answer call the resolver instead of trusting the column.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from libs.common.datetime_utils import Clock
from services.members_service.models.enums import (
    EndReason,
    FeeStatus,
    MemberStatus,
    StatusReason,
)
from services.members_service.services.renewal import (
    FeeRecordLike,
    MembershipYears,
    PeriodLike,
    RenewalSettings,
    effective_membership_year,
    has_valid_payment,
    is_membership_lapsed,
    is_new_member_at_payment,
)


class PeriodIntegrityError(ValueError):
    """A member's periods break the single-open-period invariant."""

    def __init__(self, member_id, open_count: int):
        self.member_id = member_id
        self.open_count = open_count
        super().__init__(
            f"Member {member_id} has {open_count} open membership periods"
        )


@dataclass(frozen=True)
class DetailedMembershipStatus:
    status: MemberStatus
    reason: StatusReason
    end_date: Optional[date] = None
    end_reason: Optional[EndReason] = None
    years: Optional[MembershipYears] = None

    @property
    def is_lapsed(self) -> bool:
        return self.reason == StatusReason.NON_PAYMENT


def find_open_periods(periods: Sequence[PeriodLike]) -> list:
    return [p for p in periods if p.end_date is None]


def find_last_ended_period(periods: Sequence[PeriodLike]):
    """Most recently ended period, or None."""
    ended = [p for p in periods if p.end_date is not None]
    if not ended:
        return None
    return max(ended, key=lambda p: p.end_date)


def ensure_single_open_period(periods: Sequence[PeriodLike], member_id=None) -> None:
    """Raise PeriodIntegrityError when more than one period is open."""
    open_count = len(find_open_periods(periods))
    if open_count > 1:
        raise PeriodIntegrityError(member_id, open_count)


def resolve_membership_status(
    periods: Sequence[PeriodLike],
    fee_record: Optional[FeeRecordLike],
    settings: RenewalSettings,
    clock: Clock,
    member_created_at: Optional[datetime] = None,
) -> DetailedMembershipStatus:
    """
    Derive the member's detailed status. First match wins:

    1. No periods at all: pending.
    2. Periods exist but none is open: inactive, former member.
    3. An open period whose fee has lapsed: inactive, non payment. This is
       the target status; closing the period is the status sync's job.
    4. Otherwise: registered.
    """
    if not periods:
        return DetailedMembershipStatus(
            status=MemberStatus.PENDING, reason=StatusReason.NEVER_ACTIVATED
        )

    if not find_open_periods(periods):
        last_ended = find_last_ended_period(periods)
        return DetailedMembershipStatus(
            status=MemberStatus.INACTIVE,
            reason=StatusReason.FORMER_MEMBER,
            end_date=last_ended.end_date if last_ended else None,
            end_reason=getattr(last_ended, "end_reason", None),
        )

    current_year = clock.now().year
    payment_year = fee_record.fee_payment_year if fee_record is not None else None
    is_new = is_new_member_at_payment(periods, payment_year)

    years = None
    if has_valid_payment(fee_record):
        years = effective_membership_year(
            fee_record.fee_payment_year,
            fee_record.fee_payment_date,
            settings.cutoff,
            is_new,
        )

    if is_membership_lapsed(
        fee_record, settings.cutoff, is_new, current_year, member_created_at
    ):
        return DetailedMembershipStatus(
            status=MemberStatus.INACTIVE,
            reason=StatusReason.NON_PAYMENT,
            years=years,
        )

    return DetailedMembershipStatus(
        status=MemberStatus.REGISTERED,
        reason=StatusReason.PAID if years else StatusReason.FIRST_YEAR_GRACE,
        years=years,
    )


def determine_fee_status(
    fee_payment_year: Optional[int], current_year: int
) -> FeeStatus:
    """Paid for the current or the following year counts as current."""
    if fee_payment_year in (current_year, current_year + 1):
        return FeeStatus.CURRENT
    return FeeStatus.PAYMENT_REQUIRED
