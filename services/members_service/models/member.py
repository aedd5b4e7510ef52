"""Member, fee-payment record and membership period models.

- Member: identity, role and the cached membership status
- MembershipDetails: fee-payment record and membership card (one per member)
- MembershipPeriod: contiguous intervals of membership; ``end_date`` NULL = open
"""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.members_service.models.enums import (
    EndReason,
    MemberRole,
    MemberStatus,
    enum_values,
)


class Member(Base):
    """Core member identity and status.

    ``status`` is a cache of what the status resolver derives from periods,
    the fee record and the organization's renewal settings. Only the status
    sync and explicit admin actions write it.
    """

    __tablename__ = "members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, index=True, nullable=True
    )
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, index=True, nullable=True)

    # Status
    status: Mapped[MemberStatus] = mapped_column(
        SAEnum(
            MemberStatus,
            name="member_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=MemberStatus.PENDING,
        index=True,
    )
    registration_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    role: Mapped[MemberRole] = mapped_column(
        SAEnum(
            MemberRole,
            name="member_role_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=MemberRole.MEMBER,
    )

    # Minutes of recognised activity over the current and previous year
    activity_hours: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=0
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    details: Mapped[Optional["MembershipDetails"]] = relationship(
        "MembershipDetails", back_populates="member", uselist=False, lazy="selectin"
    )
    periods: Mapped[list["MembershipPeriod"]] = relationship(
        "MembershipPeriod",
        back_populates="member",
        lazy="selectin",
        order_by="MembershipPeriod.start_date",
    )

    def __repr__(self):
        return f"<Member {self.full_name} status={self.status.value}>"


class MembershipDetails(Base):
    """Fee payment record and membership card."""

    __tablename__ = "membership_details"

    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True
    )
    fee_payment_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fee_payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    card_number: Mapped[Optional[str]] = mapped_column(
        String, unique=True, nullable=True
    )
    card_stamp_issued: Mapped[bool] = mapped_column(Boolean, default=False)

    member: Mapped["Member"] = relationship("Member", back_populates="details")

    def __repr__(self):
        return (
            f"<MembershipDetails member_id={self.member_id} "
            f"paid={self.fee_payment_year}>"
        )


class MembershipPeriod(Base):
    """A contiguous interval of membership.

    At most one period per member is open at any time and periods of one
    member never overlap. The application enforces this; a violation is a
    data-integrity fault that the status sync reports instead of resolving.
    """

    __tablename__ = "membership_periods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("members.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_reason: Mapped[Optional[EndReason]] = mapped_column(
        SAEnum(
            EndReason,
            name="membership_end_reason_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=True,
    )

    member: Mapped["Member"] = relationship("Member", back_populates="periods")

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def __repr__(self):
        return (
            f"<MembershipPeriod {self.id} member_id={self.member_id} "
            f"{self.start_date}..{self.end_date}>"
        )
