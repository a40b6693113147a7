from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.core.config import settings
from safebox.core.security import get_current_user
from safebox.db.models.user import User
from safebox.db.repositories.file import get_user_stats
from safebox.db.session import get_db, utcnow
from safebox.schemas.file import FileStats

router = APIRouter()


@router.get("/stats")
async def storage_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Counters shown on the dashboard overview."""
    recent_since = utcnow() - timedelta(days=settings.RECENT_DAYS)
    stats = await get_user_stats(db, user.id, recent_since)
    return {"success": True, "data": FileStats(**stats)}
