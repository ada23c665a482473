"""
Data models for the moderator registry.
"""

from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import List, Optional
from moderation_backend.authentication.schemas import UserRole
from moderation_backend.permissions.schemas import Permission


class ModeratorInfo(BaseModel):
    assigned_date: datetime
    permissions: List[Permission]
    handled_reports: int = 0
    average_response_time: float = 0  # hours
    is_active: bool = True


class Moderator(BaseModel):
    user_id: str
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    role: UserRole
    moderator_info: Optional[ModeratorInfo] = None  # admins carry none


class UserProfile(BaseModel):
    """The user being promoted into the registry."""
    user_id: str
    username: Optional[str] = None
    email: Optional[EmailStr] = None


class ModeratorCreate(UserProfile):
    permissions: List[str]


class PermissionsUpdate(BaseModel):
    permissions: List[str]
