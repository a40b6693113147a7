import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.db.repositories.user import get_or_create_user
from safebox.db.session import get_db
from safebox.schemas.user import UserGetOrCreate, UserRead

router = APIRouter()
logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


@router.post("/get-or-create")
async def get_or_create(data: UserGetOrCreate, db: AsyncSession = Depends(get_db)):
    """
    Maps an email the client already verified with Google to a user row.
    Called on every sign-in; the first call for an email creates the user.
    """
    email = data.email.strip()
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")
    if not validate_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    user, created = await get_or_create_user(db, email, data.name)
    if created:
        logger.info("Created user %s for %s", user.id, email)
    return {"success": True, "data": UserRead.model_validate(user)}
