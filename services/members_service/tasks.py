"""Scheduled member status reconciliation."""

from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import Clock, SystemClock
from libs.common.logging import get_logger
from libs.db.session import get_async_db

from services.members_service.services.status_sync import (
    MemberStatusSync,
    SyncResult,
)

logger = get_logger(__name__)


async def reconcile_member_statuses(clock: Optional[Clock] = None) -> Optional[SyncResult]:
    """
    Run the status sync across all organizations.

    Runs without a caller, so audit entries carry no ``performed_by``.
    """
    clock = clock or SystemClock(get_settings().TIMEZONE)
    result = None
    async for db in get_async_db():
        try:
            result = await MemberStatusSync(db, clock).run_sync()
            if result.success:
                logger.info("Scheduled status sync: %s", result.message)
            else:
                logger.error("Scheduled status sync incomplete: %s", result.message)
        except Exception:
            logger.exception("Error reconciling member statuses")
            await db.rollback()
        finally:
            await db.close()
            break
    return result
