"""Per-organization membership settings and the audit trail."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, DateTime, Integer, String, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from services.members_service.models.enums import AuditResult, enum_values


class OrganizationSettings(Base):
    """Renewal cutoff and activity threshold for one organization.

    Missing rows (or NULL columns) fall back to the application defaults.
    """

    __tablename__ = "organization_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, unique=True, nullable=True
    )
    # 1-based month: 11 = November
    renewal_start_month: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    renewal_start_day: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    activity_hours_threshold: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )
    updated_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self) -> str:
        return f"<OrganizationSettings org={self.organization_id}>"


class AuditLog(Base):
    """Tracks membership state changes, both admin-driven and automatic."""

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, index=True, nullable=True
    )
    action_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # NULL for actions run by the scheduler
    performed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    action_details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    status: Mapped[AuditResult] = mapped_column(
        SAEnum(
            AuditResult,
            name="audit_result_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=AuditResult.SUCCESS,
    )
    affected_member: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, index=True, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action_type} member={self.affected_member}>"
