from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class ActivityOut(BaseModel):
    id: int
    user_id: Optional[UUID] = None
    username: Optional[str] = None
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    message: str
    total: int
    data: List[ActivityOut]
