"""Enum definitions for members service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class MemberStatus(str, enum.Enum):
    """Persisted (cached) membership status."""

    PENDING = "pending"
    REGISTERED = "registered"
    INACTIVE = "inactive"


class MemberRole(str, enum.Enum):
    MEMBER = "member"
    ADMINISTRATOR = "member_administrator"
    SUPERUSER = "member_superuser"


# Operator accounts are never auto-terminated
ELEVATED_ROLES = (MemberRole.ADMINISTRATOR, MemberRole.SUPERUSER)


class EndReason(str, enum.Enum):
    """Why a membership period was closed."""

    WITHDRAWAL = "withdrawal"
    EXPULSION = "expulsion"
    DEATH = "death"
    INACTIVITY = "inactivity"
    NON_PAYMENT = "non_payment"
    OTHER = "other"


class ActivityStatus(str, enum.Enum):
    ACTIVE = "active"
    PASSIVE = "passive"


class FeeStatus(str, enum.Enum):
    CURRENT = "current"
    PAYMENT_REQUIRED = "payment_required"


class StatusReason(str, enum.Enum):
    """Why the resolver produced a given detailed status."""

    NEVER_ACTIVATED = "never_activated"
    FORMER_MEMBER = "former_member"
    NON_PAYMENT = "non_payment"
    PAID = "paid"
    FIRST_YEAR_GRACE = "first_year_grace"


class AuditResult(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
