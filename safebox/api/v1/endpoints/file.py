import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status, File as FastAPIFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from safebox.core.config import settings
from safebox.core.security import get_current_user, is_valid_id
from safebox.core.storage import (
    filename_too_long,
    get_extension,
    is_allowed_file,
    relative_file_path,
    remove_blob,
    resolve_file_path,
    sanitize_filename,
    save_upload,
    user_upload_dir,
)
from safebox.db.models.user import User
from safebox.db.repositories.activity import log_activity
from safebox.db.repositories.file import (
    create_file,
    delete_file as delete_file_record,
    filename_exists,
    get_user_file,
    list_user_files,
    set_favorite,
)
from safebox.db.session import get_db
from safebox.schemas.file import FileRead

router = APIRouter()
logger = logging.getLogger(__name__)


async def get_owned_file_or_404(db: AsyncSession, user: User, file_id: int):
    file = await get_user_file(db, user.id, file_id) if is_valid_id(file_id) else None
    if not file:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return file


@router.get("")
async def list_files(
    favorite: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    files = await list_user_files(db, user.id, favorite_only=favorite == "true")
    return {
        "success": True,
        "data": [FileRead.from_file(file, settings.PUBLIC_BASE_URL) for file in files],
    }


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = FastAPIFile(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    filename = sanitize_filename(file.filename)
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")
    if filename_too_long(filename):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File name is too long (maximum 255 bytes)",
        )

    mime_type = file.content_type or "application/octet-stream"
    if not is_allowed_file(filename, mime_type):
        ext = get_extension(filename) or "(none)"
        logger.info("Rejected upload %r (%s) for user %s", filename, mime_type, user.id)
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"File type {ext} ({mime_type}) is not allowed",
        )

    if await filename_exists(db, user.id, filename):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A file named {filename} already exists",
        )

    destination = user_upload_dir(user.id) / filename
    file_size = await save_upload(file, destination, settings.max_upload_size)

    try:
        record = await create_file(
            db,
            user_id=user.id,
            filename=filename,
            file_path=relative_file_path(user.id, filename),
            file_type=mime_type,
            file_size=file_size,
        )
    except Exception:
        # No blob without a row
        remove_blob(destination)
        raise

    data = FileRead.from_file(record, settings.PUBLIC_BASE_URL)
    logger.info("User %s uploaded %s (%d bytes)", user.id, filename, file_size)
    await log_activity(db, user.id, f"File uploaded: {filename}")

    return {"success": True, "data": data}


@router.get("/{file_id}")
async def get_file(
    file_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    file = await get_owned_file_or_404(db, user, file_id)
    return {"success": True, "data": FileRead.from_file(file, settings.PUBLIC_BASE_URL)}


@router.get("/{file_id}/download")
async def download_file(
    file_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    file = await get_owned_file_or_404(db, user, file_id)

    filepath = resolve_file_path(file.file_path)
    if not filepath.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="File not found on the server")

    return FileResponse(
        path=str(filepath),
        filename=file.filename,
        media_type=file.file_type or "application/octet-stream",
    )


@router.patch("/{file_id}/favorite")
async def toggle_favorite(
    file_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    file = await get_owned_file_or_404(db, user, file_id)
    filename = file.filename

    # Read-then-write; concurrent toggles may lose an update.
    file = await set_favorite(db, file, not file.favorite)
    favorite = bool(file.favorite)

    if favorite:
        await log_activity(db, user.id, f"File added to favorites: {filename}")
    else:
        await log_activity(db, user.id, f"File removed from favorites: {filename}")

    return {"success": True, "message": "Favorite status updated", "favorite": favorite}


@router.delete("/{file_id}")
async def delete_file(
    file_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    file = await get_owned_file_or_404(db, user, file_id)
    user_id, filename, file_path = user.id, file.filename, file.file_path

    # Logged before anything is removed so the entry survives a failed delete
    await log_activity(db, user_id, f"File deleted: {filename}")

    # A failed log write rolls back and expires loaded instances
    file = await get_user_file(db, user_id, file_id)
    if not file:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    filepath = resolve_file_path(file_path)
    try:
        if not remove_blob(filepath):
            logger.warning("Blob %s for file %s was already missing", filepath, file_id)
    except OSError:
        logger.exception("Could not remove blob %s for file %s", filepath, file_id)

    await delete_file_record(db, file)
    logger.info("User %s deleted %s", user_id, filename)

    return {"success": True, "message": "File deleted"}
