from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SpaceCreate(BaseModel):
    group_id: str
    name: str
    description: Optional[str] = None
    photo_url: Optional[str] = None
    parent_id: Optional[str] = None


class SpaceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    photo_url: Optional[str] = None
    # Only applied when explicitly present in the payload; null moves the space to the root
    parent_id: Optional[str] = None


class SpaceResponse(BaseModel):
    id: str
    group_id: str
    name: str
    description: Optional[str] = None
    photo_url: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True
