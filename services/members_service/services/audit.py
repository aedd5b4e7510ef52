"""Audit trail writer."""

import uuid
from typing import Any, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service.models import AuditLog, AuditResult


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def log_action(
    db: AsyncSession,
    action: str,
    performed_by: Optional[uuid.UUID],
    details: Optional[dict[str, Any]] = None,
    request: Optional[Request] = None,
    result: AuditResult = AuditResult.SUCCESS,
    affected_member: Optional[uuid.UUID] = None,
    organization_id: Optional[uuid.UUID] = None,
    ip_address: Optional[str] = None,
) -> AuditLog:
    """
    Stage an audit entry in the caller's transaction.

    The entry is committed (or rolled back) together with the change it
    describes.
    """
    entry = AuditLog(
        action_type=action,
        performed_by=performed_by,
        action_details=details,
        ip_address=ip_address or client_ip(request),
        status=result,
        affected_member=affected_member,
        organization_id=organization_id,
    )
    db.add(entry)
    return entry
