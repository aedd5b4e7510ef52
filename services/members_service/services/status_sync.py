"""Member status reconciliation.

Recomputes every candidate member's status and writes back divergences:

- Pass A promotes members who hold a card but whose stored status lags
  (``registered`` / ``registration_completed``).
- Pass B terminates registered members whose fee has lapsed: status becomes
  ``inactive`` and every open period is closed on Dec 31 of its start year
  with reason ``non_payment``.

Each member is read, modified and committed in its own transaction together
with its audit entry. A failure rolls back that member only; the batch goes
on and the result reports the real partial counts. Running the sync again
with no data change writes nothing.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from libs.common.datetime_utils import Clock
from libs.common.logging import get_logger
from sqlalchemy.ext.asyncio import AsyncSession

from services.members_service import repository
from services.members_service.models import (
    ELEVATED_ROLES,
    AuditResult,
    EndReason,
    Member,
    MemberStatus,
)
from services.members_service.services.audit import log_action
from services.members_service.services.settings import get_renewal_settings
from services.members_service.services.status_resolver import (
    PeriodIntegrityError,
    ensure_single_open_period,
    find_open_periods,
    resolve_membership_status,
)

logger = get_logger(__name__)

ACTION_STATUS_SYNC = "member_status_sync"
ACTION_AUTO_TERMINATION = "membership_auto_terminated"


@dataclass
class MemberSyncFailure:
    member_id: uuid.UUID
    stage: str
    error: str


@dataclass
class PassOutcome:
    updated: int = 0
    failures: list[MemberSyncFailure] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SyncResult:
    success: bool
    message: str
    updated_count: int = 0
    inactive_updated_count: int = 0
    failed_count: int = 0
    failures: list[MemberSyncFailure] = field(default_factory=list)


def period_close_date(start_date: date) -> date:
    """Lapsed periods end on Dec 31 of the year they started."""
    return date(start_date.year, 12, 31)


class MemberStatusSync:
    """Reconcile stored member statuses with the resolver's verdict."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock,
        *,
        performed_by: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.clock = clock
        self.performed_by = performed_by
        self.ip_address = ip_address

    # ------------------------------------------------------------------
    # Pass A
    # ------------------------------------------------------------------

    async def promote_registered_members(
        self, organization_id: Optional[uuid.UUID] = None
    ) -> PassOutcome:
        """Card holders whose status lags become registered."""
        outcome = PassOutcome()
        member_ids = await repository.find_members_by_status_and_card(
            self.db, organization_id
        )
        if not member_ids:
            logger.info("No members need a registration status update")
            return outcome

        logger.info("Found %d members to mark as registered", len(member_ids))
        for member_id in member_ids:
            if await self._run_in_transaction(
                member_id, "promote", self._promote_member, outcome
            ):
                outcome.updated += 1
        return outcome

    async def _promote_member(self, member_id: uuid.UUID) -> bool:
        member = await repository.get_member(self.db, member_id)
        if member is None:
            return False
        if member.status == MemberStatus.REGISTERED and member.registration_completed:
            return False

        old = {
            "status": member.status.value,
            "registration_completed": bool(member.registration_completed),
        }
        repository.update_member_status(member, MemberStatus.REGISTERED, True)
        self._audit(
            ACTION_STATUS_SYNC,
            member,
            {
                "action": "update",
                "entity": "member",
                "old": old,
                "new": {"status": "registered", "registration_completed": True},
            },
        )
        logger.info(
            "Member %s (%s) marked as registered",
            member.full_name,
            member.id,
            extra=self._log_context(member, "promote"),
        )
        return True

    # ------------------------------------------------------------------
    # Pass B
    # ------------------------------------------------------------------

    async def terminate_lapsed_members(
        self, organization_id: Optional[uuid.UUID] = None
    ) -> PassOutcome:
        """Registered members whose fee lapsed become inactive."""
        outcome = PassOutcome()
        member_ids = await repository.find_lapse_candidates(self.db, organization_id)
        logger.info("Checking %d registered members for lapsed fees", len(member_ids))

        for member_id in member_ids:
            if await self._run_in_transaction(
                member_id, "terminate", self._terminate_if_lapsed, outcome
            ):
                outcome.updated += 1
        return outcome

    async def _terminate_if_lapsed(self, member_id: uuid.UUID) -> bool:
        member = await repository.get_member(self.db, member_id)
        if member is None:
            return False
        if member.status != MemberStatus.REGISTERED or member.role in ELEVATED_ROLES:
            return False

        ensure_single_open_period(member.periods, member.id)
        settings = await get_renewal_settings(self.db, member.organization_id)
        detailed = resolve_membership_status(
            member.periods,
            member.details,
            settings,
            self.clock,
            member_created_at=member.created_at,
        )
        if not detailed.is_lapsed:
            return False

        closed = []
        for period in find_open_periods(member.periods):
            end_date = period_close_date(period.start_date)
            repository.close_period(period, end_date, EndReason.NON_PAYMENT)
            closed.append(
                {
                    "period_id": period.id,
                    "start_date": period.start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                }
            )

        repository.update_member_status(
            member, MemberStatus.INACTIVE, bool(member.registration_completed)
        )
        details = member.details
        self._audit(
            ACTION_AUTO_TERMINATION,
            member,
            {
                "action": "update",
                "entity": "member",
                "old": {"status": "registered"},
                "new": {"status": "inactive"},
                "end_reason": EndReason.NON_PAYMENT.value,
                "fee_payment_year": details.fee_payment_year if details else None,
                "expiry_year": detailed.years.expiry_year if detailed.years else None,
                "closed_periods": closed,
            },
        )
        logger.info(
            "Membership of %s (%s) terminated for non-payment, %d period(s) closed",
            member.full_name,
            member.id,
            len(closed),
            extra=self._log_context(member, "terminate"),
        )
        return True

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    async def run_sync(self, organization_id: Optional[uuid.UUID] = None) -> SyncResult:
        """Run both passes and summarise them."""
        logger.info(
            "Starting member status sync (organization=%s, date=%s)",
            organization_id or "all",
            self.clock.now().date().isoformat(),
        )
        promoted = await self._run_pass(
            "promote", self.promote_registered_members, organization_id
        )
        terminated = await self._run_pass(
            "terminate", self.terminate_lapsed_members, organization_id
        )

        failures = promoted.failures + terminated.failures
        errors = [e for e in (promoted.error, terminated.error) if e]
        success = not failures and not errors

        message = (
            f"Member status sync finished: {promoted.updated} marked registered, "
            f"{terminated.updated} marked inactive"
        )
        if failures:
            message += f", {len(failures)} failed"
        if errors:
            message += f". Errors: {'; '.join(errors)}"

        log = logger.info if success else logger.warning
        log(message)

        return SyncResult(
            success=success,
            message=message,
            updated_count=promoted.updated,
            inactive_updated_count=terminated.updated,
            failed_count=len(failures),
            failures=failures,
        )

    async def _run_pass(self, name, pass_fn, organization_id) -> PassOutcome:
        try:
            return await pass_fn(organization_id)
        except Exception as exc:
            # Candidate lookup failed; nothing of this pass was written
            await self.db.rollback()
            logger.exception("Status sync pass '%s' failed", name)
            return PassOutcome(error=f"{name}: {exc}")

    async def _run_in_transaction(
        self, member_id: uuid.UUID, stage: str, step, outcome: PassOutcome
    ) -> bool:
        """Run one member's step and commit it, isolating any failure."""
        try:
            changed = await step(member_id)
            await self.db.commit()
            return changed
        except PeriodIntegrityError as exc:
            await self.db.rollback()
            logger.warning(
                "Skipping member %s: %s",
                member_id,
                exc,
                extra={"member_id": member_id, "sync_pass": stage},
            )
            error = str(exc)
        except Exception as exc:
            await self.db.rollback()
            logger.exception(
                "Status sync failed for member %s",
                member_id,
                extra={"member_id": member_id, "sync_pass": stage},
            )
            error = f"{type(exc).__name__}: {exc}"

        outcome.failures.append(
            MemberSyncFailure(member_id=member_id, stage=stage, error=error)
        )
        await self._audit_failure(member_id, stage, error)
        return False

    @staticmethod
    def _log_context(member: Member, stage: str) -> dict:
        return {
            "member_id": member.id,
            "organization_id": member.organization_id,
            "sync_pass": stage,
        }

    def _audit(self, action: str, member: Member, details: dict) -> None:
        log_action(
            self.db,
            action,
            self.performed_by,
            details,
            affected_member=member.id,
            organization_id=member.organization_id,
            ip_address=self.ip_address,
        )

    async def _audit_failure(self, member_id: uuid.UUID, stage: str, error: str):
        action = ACTION_STATUS_SYNC if stage == "promote" else ACTION_AUTO_TERMINATION
        try:
            organization_id = await repository.get_member_organization_id(
                self.db, member_id
            )
            log_action(
                self.db,
                action,
                self.performed_by,
                {"error": error, "stage": stage},
                result=AuditResult.FAILURE,
                affected_member=member_id,
                organization_id=organization_id,
                ip_address=self.ip_address,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.exception("Could not record audit failure for member %s", member_id)
