import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.db.models.activity import ActivityLog

logger = logging.getLogger(__name__)


async def log_activity(db: AsyncSession, user_id: int, action: str) -> ActivityLog | None:
    """
    Appends an entry to the user's activity log and commits it on its own.
    Failures are logged and swallowed: the log is best-effort and must never
    fail the request that produced it.
    """
    entry = ActivityLog(user_id=user_id, action=action)
    db.add(entry)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not record activity %r for user %s", action, user_id)
        return None
    return entry


async def get_recent_activity(db: AsyncSession, user_id: int, limit: int = 10) -> list[ActivityLog]:
    query = (
        select(ActivityLog)
        .where(ActivityLog.user_id == user_id)
        .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())
