from pydantic import BaseModel
from enum import Enum
from datetime import datetime, timedelta
from typing import Optional


class ModerationActionType(str, Enum):
    warning = "warning"
    temporary_ban = "temporary_ban"
    permanent_ban = "permanent_ban"
    listing_removal = "listing_removal"
    store_suspension = "store_suspension"
    content_edit = "content_edit"
    account_restriction = "account_restriction"


class ModerationAction(BaseModel):
    id: str
    moderator_id: str
    target_user_id: Optional[str] = None
    target_listing_id: Optional[str] = None
    target_store_id: Optional[str] = None
    report_id: Optional[str] = None
    action: ModerationActionType
    reason: str
    duration_hours: Optional[int] = None  # temporary actions only
    created_at: datetime
    is_active: bool = True

    @property
    def expires_at(self) -> Optional[datetime]:
        if self.duration_hours is None:
            return None
        return self.created_at + timedelta(hours=self.duration_hours)

    def has_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class ActionCreate(BaseModel):
    moderator_id: Optional[str] = None
    target_user_id: Optional[str] = None
    target_listing_id: Optional[str] = None
    target_store_id: Optional[str] = None
    report_id: Optional[str] = None
    action: Optional[str] = None
    reason: Optional[str] = None
    duration_hours: Optional[int] = None
