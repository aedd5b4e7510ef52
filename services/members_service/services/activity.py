"""Activity status: active vs passive by accumulated activity hours."""

from typing import Optional

from services.members_service.models.enums import ActivityStatus, MemberStatus

DEFAULT_ACTIVITY_HOURS_THRESHOLD = 20


def minutes_to_hours(minutes: float) -> float:
    return minutes / 60


def hours_to_minutes(hours: float) -> float:
    return hours * 60


def classify_activity(
    activity_minutes: Optional[float],
    threshold_hours: float = DEFAULT_ACTIVITY_HOURS_THRESHOLD,
) -> ActivityStatus:
    """
    Classify a member by recognised activity.

    ``activity_minutes`` is the stored ``activity_hours`` column, which holds
    minutes across the current and previous year. None counts as zero.
    """
    hours = minutes_to_hours(float(activity_minutes or 0))
    if hours >= threshold_hours:
        return ActivityStatus.ACTIVE
    return ActivityStatus.PASSIVE


def activity_status_for(
    membership_status: MemberStatus,
    activity_minutes: Optional[float],
    threshold_hours: float = DEFAULT_ACTIVITY_HOURS_THRESHOLD,
) -> ActivityStatus:
    """Former members are always passive whatever their stored minutes."""
    if membership_status == MemberStatus.INACTIVE:
        activity_minutes = 0
    return classify_activity(activity_minutes, threshold_hours)
