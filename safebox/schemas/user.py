from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserGetOrCreate(BaseModel):
    email: str
    name: str | None = None


class UserRead(BaseModel):
    id: int
    email: str
    name: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
