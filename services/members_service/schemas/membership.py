"""Membership administration schemas."""

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from services.members_service.models.enums import EndReason, MemberRole, MemberStatus


class FeePaymentRequest(BaseModel):
    payment_date: date


class CardUpdateRequest(BaseModel):
    card_number: Optional[str] = Field(None, pattern=r"^\d{5}$")
    stamp_issued: Optional[bool] = None


class TerminateMembershipRequest(BaseModel):
    reason: EndReason
    end_date: Optional[date] = None


class MembershipPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_date: date
    end_date: Optional[date] = None
    end_reason: Optional[EndReason] = None


class MembershipDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fee_payment_year: Optional[int] = None
    fee_payment_date: Optional[date] = None
    card_number: Optional[str] = None
    card_stamp_issued: bool = False


class MemberMembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: str
    status: MemberStatus
    registration_completed: bool
    role: MemberRole
    details: Optional[MembershipDetailsResponse] = None
    periods: list[MembershipPeriodResponse] = []


class MembershipHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    periods: list[MembershipPeriodResponse]
    current_period: Optional[MembershipPeriodResponse] = None
    total_days: int
    total_duration: str
