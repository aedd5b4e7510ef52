import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Roles allowed to run administrative membership operations
ADMIN_ROLES = frozenset({"service_role", "member_administrator", "member_superuser"})


class AuthUser(BaseModel):
    """
    Authenticated caller decoded from the bearer token.

    The auth gateway resolves the tenant and embeds it as ``organization_id``.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "member"
    member_id: Optional[uuid.UUID] = None
    organization_id: Optional[uuid.UUID] = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
