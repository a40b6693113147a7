from datetime import datetime
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict


def build_file_url(base_url: str, user_id: int, filename: str) -> str:
    return f"{base_url.rstrip('/')}/uploads/{user_id}/{quote(filename)}"


class FileRead(BaseModel):
    id: int
    user_id: int
    filename: str
    file_path: str
    file_type: str
    file_size: int
    favorite: bool
    created_at: datetime
    url: str = ""

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_file(cls, file, base_url: str) -> "FileRead":
        record = cls.model_validate(file)
        record.url = build_file_url(base_url, file.user_id, file.filename)
        return record


class FileStats(BaseModel):
    total_files: int
    total_size: int
    favorite_files: int
    recent_files: int
