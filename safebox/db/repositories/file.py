from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.db.models.file import File


async def list_user_files(db: AsyncSession, user_id: int, favorite_only: bool = False) -> list[File]:
    query = select(File).where(File.user_id == user_id)
    if favorite_only:
        query = query.where(File.favorite.is_(True))
    query = query.order_by(File.created_at.desc(), File.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_user_file(db: AsyncSession, user_id: int, file_id: int) -> File | None:
    """Looks a file up by id, only if it belongs to ``user_id``."""
    result = await db.execute(
        select(File).where(File.id == file_id).where(File.user_id == user_id)
    )
    return result.scalars().first()


async def filename_exists(db: AsyncSession, user_id: int, filename: str) -> bool:
    result = await db.execute(
        select(File.id).where(File.user_id == user_id).where(File.filename == filename)
    )
    return result.first() is not None


async def create_file(
    db: AsyncSession,
    user_id: int,
    filename: str,
    file_path: str,
    file_type: str,
    file_size: int,
) -> File:
    file = File(
        user_id=user_id,
        filename=filename,
        file_path=file_path,
        file_type=file_type,
        file_size=file_size,
        favorite=False,
    )
    db.add(file)
    await db.commit()
    await db.refresh(file)
    return file


async def set_favorite(db: AsyncSession, file: File, favorite: bool) -> File:
    file.favorite = favorite
    await db.commit()
    await db.refresh(file)
    return file


async def delete_file(db: AsyncSession, file: File) -> None:
    await db.delete(file)
    await db.commit()


async def get_user_stats(db: AsyncSession, user_id: int, recent_since: datetime) -> dict:
    """Aggregates the dashboard counters for one user in a single query."""
    query = select(
        func.count(File.id),
        func.coalesce(func.sum(File.file_size), 0),
        func.coalesce(func.sum(case((File.favorite.is_(True), 1), else_=0)), 0),
        func.coalesce(func.sum(case((File.created_at >= recent_since, 1), else_=0)), 0),
    ).where(File.user_id == user_id)
    total_files, total_size, favorite_files, recent_files = (await db.execute(query)).one()
    return {
        "total_files": total_files,
        "total_size": int(total_size),
        "favorite_files": int(favorite_files),
        "recent_files": int(recent_files),
    }
