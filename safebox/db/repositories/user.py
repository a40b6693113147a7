from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.db.models.user import User


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def create_user(db: AsyncSession, email: str, name: str | None = None) -> User:
    user = User(email=email, name=name)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost the race against a concurrent insert of the same email
        await db.rollback()
        raise
    await db.refresh(user)
    return user


async def get_or_create_user(db: AsyncSession, email: str, name: str | None = None) -> tuple[User, bool]:
    """
    Returns the user registered under ``email``, creating it on first sight.
    The second element tells whether a new row was inserted.
    """
    user = await get_user_by_email(db, email)
    if user:
        return user, False
    return await create_user(db, email, name), True
