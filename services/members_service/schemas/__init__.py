"""Members Service schemas package.

Schema files:
  - schemas/status.py      — status sync and resolved status
  - schemas/settings.py    — organization renewal settings
  - schemas/membership.py  — fees, cards, termination and history
"""

from services.members_service.schemas.membership import (  # noqa: F401
    CardUpdateRequest,
    FeePaymentRequest,
    MemberMembershipResponse,
    MembershipDetailsResponse,
    MembershipHistoryResponse,
    MembershipPeriodResponse,
    TerminateMembershipRequest,
)
from services.members_service.schemas.settings import (  # noqa: F401
    RenewalSettingsResponse,
    RenewalSettingsUpdate,
)
from services.members_service.schemas.status import (  # noqa: F401
    ResolvedStatusResponse,
    SyncFailureResponse,
    SyncMemberStatusesResponse,
)
