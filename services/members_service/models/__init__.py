"""Members Service models package.

Re-exports all models and enums so that:
  - ``from services.members_service.models import Member`` works
  - SQLAlchemy's mapper registry sees every model class on import

Model definitions are split across:
  - models/member.py       — Member, MembershipDetails, MembershipPeriod
  - models/organization.py — OrganizationSettings, AuditLog
"""

from services.members_service.models.enums import (  # noqa: F401
    ELEVATED_ROLES,
    ActivityStatus,
    AuditResult,
    EndReason,
    FeeStatus,
    MemberRole,
    MemberStatus,
    StatusReason,
)
from services.members_service.models.member import (  # noqa: F401
    Member,
    MembershipDetails,
    MembershipPeriod,
)
from services.members_service.models.organization import (  # noqa: F401
    AuditLog,
    OrganizationSettings,
)

__all__ = [
    "ELEVATED_ROLES",
    "ActivityStatus",
    "AuditResult",
    "EndReason",
    "FeeStatus",
    "MemberRole",
    "MemberStatus",
    "StatusReason",
    "Member",
    "MembershipDetails",
    "MembershipPeriod",
    "AuditLog",
    "OrganizationSettings",
]
