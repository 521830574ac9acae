from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class InventoryCreate(BaseModel):
    group_id: str
    name: str
    description: Optional[str] = None
    parent_space_id: Optional[str] = None
    parent_inventory_id: Optional[str] = None


class InventoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    # Parent fields are applied together when either is present in the payload
    parent_space_id: Optional[str] = None
    parent_inventory_id: Optional[str] = None


class InventoryResponse(BaseModel):
    id: str
    group_id: str
    name: str
    description: Optional[str] = None
    parent_space_id: Optional[str] = None
    parent_inventory_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True
