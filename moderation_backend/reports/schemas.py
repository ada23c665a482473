"""
Defines the data models and enums for report management.
"""

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime
from typing import List, Optional


class ReportType(str, Enum):
    spam = "spam"
    inappropriate_content = "inappropriate_content"
    fake_listing = "fake_listing"
    harassment = "harassment"
    fraud = "fraud"
    copyright = "copyright"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    in_review = "in_review"
    resolved = "resolved"
    dismissed = "dismissed"


class ReportPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


CLOSED_STATUSES = {ReportStatus.resolved, ReportStatus.dismissed}


class Report(BaseModel):
    id: str
    reporter_id: str
    reported_user_id: Optional[str] = None
    reported_listing_id: Optional[str] = None
    reported_store_id: Optional[str] = None
    type: ReportType
    reason: str
    description: Optional[str] = None
    priority: ReportPriority = ReportPriority.medium
    status: ReportStatus = ReportStatus.pending
    resolution: Optional[str] = None
    moderator_notes: Optional[str] = None
    assigned_moderator_id: Optional[str] = None
    evidence: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# Loosely typed on purpose: enums and lengths are checked by the lifecycle
# rules so every violation surfaces as the same ValidationError.
class ReportCreate(BaseModel):
    reporter_id: Optional[str] = None
    reported_user_id: Optional[str] = None
    reported_listing_id: Optional[str] = None
    reported_store_id: Optional[str] = None
    type: Optional[str] = None
    reason: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    evidence: List[str] = Field(default_factory=list)


class ReportStatusUpdate(BaseModel):
    status: str
    moderator_notes: Optional[str] = None
    resolution: Optional[str] = None


class ReportResolve(BaseModel):
    resolution: Optional[str] = None


class ReportAssign(BaseModel):
    moderator_id: str
