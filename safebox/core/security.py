from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.db.models.user import User
from safebox.db.repositories.user import get_user_by_id
from safebox.db.session import get_db

# Largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1


def is_valid_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


async def get_current_user(
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolves the caller from the ``x-user-id`` header.

    The header is an unsigned, client supplied user id and is trusted as is.
    It stands in for a verified session token and gives no real protection.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User ID is required")

    try:
        user_id = int(x_user_id)
    except ValueError:
        user_id = None

    if user_id is not None and not is_valid_id(user_id):
        user_id = None

    user = await get_user_by_id(db, user_id) if user_id is not None else None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Invalid user")
    return user
