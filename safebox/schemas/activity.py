from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ActivityRead(BaseModel):
    action: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
