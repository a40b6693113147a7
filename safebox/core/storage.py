import logging
import os
import re
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

from safebox.core.config import settings

logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(settings.UPLOAD_DIR)
CHUNK_SIZE = 1024 * 1024
MAX_FILENAME_LENGTH = 255

ALLOWED_TYPES = {
    "image": {"image/jpeg", "image/png", "image/gif"},
    "document": {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    },
    "video": {"video/mp4", "video/quicktime"},
    "archive": {
        "application/zip",
        "application/x-rar-compressed",
        "application/x-7z-compressed",
    },
}

ALLOWED_EXTENSIONS = {
    "image": {".jpg", ".jpeg", ".png", ".gif"},
    "document": {".pdf", ".doc", ".docx", ".txt"},
    "video": {".mp4", ".mov"},
    "archive": {".zip", ".rar", ".7z"},
}


def sanitize_filename(filename: str) -> str:
    """
    Keeps only the base name of a client supplied filename and replaces
    characters that are not allowed in file names.
    """
    name = re.split(r"[\\/]", filename or "")[-1]
    name = re.sub(r'[<>:"|?*\x00-\x1f]', "_", name).strip()
    if name in ("", ".", ".."):
        return ""
    return name


def filename_too_long(filename: str) -> bool:
    """Names must fit both the `files.filename` column and the filesystem."""
    return len(filename) > MAX_FILENAME_LENGTH or len(filename.encode("utf-8")) > MAX_FILENAME_LENGTH


def get_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def file_category(filename: str, mime_type: str | None) -> str | None:
    """
    Returns the allow-list category that accepts both the MIME type and the
    extension of the file, or None when no category accepts both.
    """
    ext = get_extension(filename)
    for category, types in ALLOWED_TYPES.items():
        if mime_type in types and ext in ALLOWED_EXTENSIONS[category]:
            return category
    return None


def is_allowed_file(filename: str, mime_type: str | None) -> bool:
    return file_category(filename, mime_type) is not None


def format_size(size_in_bytes: int) -> str:
    if size_in_bytes >= 1024 * 1024:
        return f"{round(size_in_bytes / (1024 * 1024), 2)} MB"
    return f"{round(size_in_bytes / 1024, 2)} KB"


def user_upload_dir(user_id: int, root: Path = UPLOAD_DIR) -> Path:
    path = root / str(user_id)
    path.mkdir(parents=True, exist_ok=True)
    return path


def relative_file_path(user_id: int, filename: str) -> str:
    return f"{user_id}/{filename}"


def resolve_file_path(file_path: str, root: Path = UPLOAD_DIR) -> Path:
    return root / file_path


async def save_upload(upload: UploadFile, destination: Path, max_size: int) -> int:
    """
    Streams the upload to ``destination`` and returns the number of bytes
    written. Nothing is left on disk when the file exceeds ``max_size``.
    """
    written = 0
    try:
        out = open(destination, "xb")
    except FileExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A file named {destination.name} already exists",
        )

    # Only a blob this call created is cleaned up
    try:
        with out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_size:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=f"File exceeds the maximum size of {format_size(max_size)}",
                    )
                out.write(chunk)
    except (HTTPException, OSError):
        remove_blob(destination)
        raise
    return written


def remove_blob(path: Path) -> bool:
    """Removes a stored blob; a missing blob is not an error."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
