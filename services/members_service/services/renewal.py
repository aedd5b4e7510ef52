"""
Renewal cutoff policy: which membership year a fee payment covers.

Pure functions with no database dependencies for easy testing.

A payment made after the organization's renewal cutoff (default November 1)
is a renewal for the following year, unless it is the member's very first
payment. A membership bought for ``effective_year`` stays valid through the
end of ``expiry_year = effective_year + 1``.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, Sequence


class PeriodLike(Protocol):
    start_date: date
    end_date: Optional[date]


class FeeRecordLike(Protocol):
    fee_payment_year: Optional[int]
    fee_payment_date: Optional[date]


@dataclass(frozen=True)
class FeeRecord:
    fee_payment_year: Optional[int] = None
    fee_payment_date: Optional[date] = None
    card_number: Optional[str] = None


@dataclass(frozen=True)
class RenewalCutoff:
    """Month (1-12) and day within a payment year."""

    month: int = 11
    day: int = 1


@dataclass(frozen=True)
class RenewalSettings:
    """Organization-level inputs to status resolution."""

    renewal_start_month: int = 11
    renewal_start_day: int = 1
    activity_hours_threshold: int = 20

    @property
    def cutoff(self) -> RenewalCutoff:
        return RenewalCutoff(month=self.renewal_start_month, day=self.renewal_start_day)


@dataclass(frozen=True)
class MembershipYears:
    effective_year: int
    expiry_year: int


def cutoff_date(year: int, cutoff: RenewalCutoff) -> date:
    """Cutoff date in ``year``; a day past the month's end is clamped."""
    last_day = calendar.monthrange(year, cutoff.month)[1]
    return date(year, cutoff.month, min(cutoff.day, last_day))


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def has_valid_payment(fee_record: Optional[FeeRecordLike]) -> bool:
    """Both the payment year and the payment date must be recorded."""
    return bool(
        fee_record is not None
        and fee_record.fee_payment_year
        and fee_record.fee_payment_date
    )


def is_new_member_at_payment(
    periods: Sequence[PeriodLike], fee_payment_year: Optional[int]
) -> bool:
    """
    True when the member's whole history is one period starting in the
    payment year, i.e. the payment is their first, not a renewal.

    Every historical period counts: a member who left and rejoined is not new.
    """
    if fee_payment_year is None or len(periods) != 1:
        return False
    return _as_date(periods[0].start_date).year == fee_payment_year


def effective_membership_year(
    fee_payment_year: Optional[int],
    fee_payment_date: Optional[date],
    cutoff: RenewalCutoff,
    is_new_member_at_payment: bool,
) -> Optional[MembershipYears]:
    """
    Compute the effective membership year and its expiry year.

    Args:
        fee_payment_year: Year the fee was paid for
        fee_payment_date: Date the payment was recorded
        cutoff: Organization's renewal cutoff
        is_new_member_at_payment: First-ever payment (never shifted)

    Returns:
        MembershipYears, or None when year or date is missing (no valid payment)
    """
    payment_date = _as_date(fee_payment_date)
    if not fee_payment_year or payment_date is None:
        return None

    after_cutoff = payment_date > cutoff_date(fee_payment_year, cutoff)
    effective_year = fee_payment_year
    if after_cutoff and not is_new_member_at_payment:
        effective_year = fee_payment_year + 1

    return MembershipYears(effective_year=effective_year, expiry_year=effective_year + 1)


def is_membership_lapsed(
    fee_record: Optional[FeeRecordLike],
    cutoff: RenewalCutoff,
    is_new_member: bool,
    current_year: int,
    member_created_at: Optional[datetime] = None,
) -> bool:
    """
    Whether the membership has lapsed in ``current_year``.

    Without a valid payment only members created this year are unexpired
    (first-year grace). With one, the membership lapses once the current year
    is past the expiry year; the expiry year itself is still valid.
    """
    years = None
    if has_valid_payment(fee_record):
        years = effective_membership_year(
            fee_record.fee_payment_year,
            fee_record.fee_payment_date,
            cutoff,
            is_new_member,
        )

    if years is None:
        created = _as_date(member_created_at)
        return not (created is not None and created.year == current_year)

    return current_year > years.expiry_year


def membership_start_for_payment(
    payment_date: date, cutoff: RenewalCutoff, is_new_member: bool
) -> date:
    """
    Start date of a period opened by a payment.

    A renewal paid after the cutoff covers the following year, so the period
    starts on January 1 of that year. Otherwise it starts on the payment date.
    """
    years = effective_membership_year(
        payment_date.year, payment_date, cutoff, is_new_member
    )
    if years.effective_year > payment_date.year:
        return date(years.effective_year, 1, 1)
    return payment_date
