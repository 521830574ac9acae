from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
import re

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    accent_color: Optional[str] = None

    @field_validator("accent_color")
    @classmethod
    def check_accent_color(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _HEX_COLOR.match(value):
            raise ValueError("accent_color must be a hex color like #A1B2C3")
        return value


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    accent_color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
