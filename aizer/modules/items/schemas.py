from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime


class ItemCreate(BaseModel):
    group_id: str
    name: str
    quantity: int = 1
    description: Optional[str] = None
    photo_url: Optional[str] = None
    color: Optional[str] = None
    price: Optional[float] = None
    measures: Optional[Dict[str, Any]] = None
    inventory_id: Optional[str] = None
    space_id: Optional[str] = None


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[int] = None
    description: Optional[str] = None
    photo_url: Optional[str] = None
    color: Optional[str] = None
    price: Optional[float] = None
    measures: Optional[Dict[str, Any]] = None
    # Placement fields are applied together when either is present in the payload
    inventory_id: Optional[str] = None
    space_id: Optional[str] = None


class ItemResponse(BaseModel):
    id: str
    group_id: str
    inventory_id: Optional[str] = None
    space_id: Optional[str] = None
    name: str
    quantity: int
    description: Optional[str] = None
    photo_url: Optional[str] = None
    color: Optional[str] = None
    price: Optional[float] = None
    measures: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True
