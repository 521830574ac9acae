from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class MemberInvite(BaseModel):
    email: EmailStr
    is_admin: bool = False


class MemberRoleUpdate(BaseModel):
    is_admin: bool


class MemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: str  # owner, admin, member
    accepted_at: Optional[datetime] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvitationResponse(BaseModel):
    id: str
    group_id: str
    group_name: str
    group_description: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
