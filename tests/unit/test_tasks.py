"""Unit tests for the scheduled status reconciliation and its worker."""

from datetime import date

import pytest
from libs.common.datetime_utils import FixedClock
from services.members_service import repository, tasks
from services.members_service.models import MemberStatus
from tests.factories import create_member


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reconcile_runs_sync_across_organizations(db_session, monkeypatch):
    async def _db():
        yield db_session

    monkeypatch.setattr(tasks, "get_async_db", _db)
    member_id = await create_member(
        db_session,
        periods=[(date(2023, 3, 1), None)],
        payment_year=2023,
        payment_date=date(2023, 3, 1),
        organization_id=None,
    )

    result = await tasks.reconcile_member_statuses(FixedClock(date(2025, 6, 15)))

    assert result.success is True
    assert result.inactive_updated_count == 1
    member = await repository.get_member(db_session, member_id)
    assert member.status == MemberStatus.INACTIVE


@pytest.mark.unit
def test_worker_schedules_reconciliation():
    from services.members_service.worker import (
        WorkerSettings,
        task_reconcile_member_statuses,
    )

    assert task_reconcile_member_statuses in WorkerSettings.functions
    assert len(WorkerSettings.cron_jobs) == 1
    job = WorkerSettings.cron_jobs[0]
    assert job.hour == {0, 12}
    assert job.minute == 0
