from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.core.config import settings
from safebox.core.security import get_current_user
from safebox.db.models.user import User
from safebox.db.repositories.activity import get_recent_activity
from safebox.db.session import get_db
from safebox.schemas.activity import ActivityRead

router = APIRouter()


@router.get("/activity")
async def recent_activity(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entries = await get_recent_activity(db, user.id, settings.ACTIVITY_LIMIT)
    return {"success": True, "data": [ActivityRead.model_validate(entry) for entry in entries]}
