"""ARQ worker for members service background tasks.

Schedules the member status sync via ARQ cron jobs backed by Redis.
Run with: arq services.members_service.worker.WorkerSettings
"""

from arq import cron
from libs.common.arq_config import get_redis_settings
from libs.common.config import get_settings
from libs.common.logging import configure_logging, get_logger

logger = get_logger(__name__)
settings = get_settings()


# ── Wrapper functions (ARQ requires top-level async callables) ──


async def task_reconcile_member_statuses(ctx: dict):
    """Promote card holders and terminate lapsed memberships."""
    from services.members_service.tasks import reconcile_member_statuses

    logger.info("Running: reconcile_member_statuses")
    await reconcile_member_statuses()


async def startup(ctx: dict):
    configure_logging()


# ── Worker configuration ──


class WorkerSettings:
    """ARQ worker settings with cron job schedules."""

    redis_settings = get_redis_settings()
    on_startup = startup

    functions = [task_reconcile_member_statuses]

    cron_jobs = [
        # Twice daily by default (STATUS_SYNC_HOURS)
        cron(
            task_reconcile_member_statuses,
            hour=set(settings.STATUS_SYNC_HOURS),
            minute=0,
            run_at_startup=False,
        ),
    ]
