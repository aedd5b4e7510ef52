"""Status sync and resolved-status schemas."""

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from services.members_service.models.enums import (
    ActivityStatus,
    EndReason,
    FeeStatus,
    MemberStatus,
    StatusReason,
)


class SyncFailureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    member_id: uuid.UUID = Field(serialization_alias="memberId")
    stage: str
    error: str


class SyncMemberStatusesResponse(BaseModel):
    """Summary of one reconciliation run, keyed the way the admin UI reads it."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    success: bool
    message: str
    updated_count: int = Field(0, serialization_alias="updatedCount")
    inactive_updated_count: int = Field(0, serialization_alias="inactiveUpdatedCount")
    failed_count: int = Field(0, serialization_alias="failedCount")
    failures: list[SyncFailureResponse] = Field(default_factory=list)


class ResolvedStatusResponse(BaseModel):
    member_id: uuid.UUID
    status: MemberStatus
    reason: StatusReason
    stored_status: MemberStatus
    is_stale: bool
    activity_status: ActivityStatus
    activity_hours: float
    fee_status: FeeStatus
    effective_year: Optional[int] = None
    expiry_year: Optional[int] = None
    end_date: Optional[date] = None
    end_reason: Optional[EndReason] = None
