from pydantic import BaseModel
from enum import Enum
from typing import Optional


# CALLER ROLES (as asserted by the upstream gateway)
class UserRole(str, Enum):
    USER = "user"               # Regular marketplace user
    MODERATOR = "moderator"     # Bounded capability set
    ADMIN = "admin"             # Implicitly holds every capability


STAFF_ROLES = {UserRole.MODERATOR, UserRole.ADMIN}


# CALLER IDENTITY (already authenticated upstream)
class TokenData(BaseModel):
    user_id: str
    role: UserRole = UserRole.USER
    username: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
