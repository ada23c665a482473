"""
Defines the data models and enums for support tickets and their threaded
responses.
"""

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime
from typing import Dict, List, Optional
from moderation_backend.authentication.schemas import UserRole
from moderation_backend.reports.schemas import ReportPriority


class SupportCategory(str, Enum):
    technical = "technical"
    billing = "billing"
    account = "account"
    listing = "listing"
    store = "store"
    report = "report"
    other = "other"


class TicketStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    waiting_user = "waiting_user"
    resolved = "resolved"
    closed = "closed"


CLOSED_TICKET_STATUSES = {TicketStatus.resolved, TicketStatus.closed}


class SupportResponse(BaseModel):
    id: str
    ticket_id: str
    responder_id: str
    responder_role: UserRole
    message: str
    is_internal: bool = False  # visible to staff only
    attachments: List[str] = Field(default_factory=list)
    created_at: datetime


class SupportTicket(BaseModel):
    id: str
    user_id: str
    subject: str
    message: str
    category: SupportCategory
    priority: ReportPriority = ReportPriority.medium
    status: TicketStatus = TicketStatus.open
    assigned_moderator_id: Optional[str] = None
    moderator_notes: Optional[str] = None
    resolution: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)
    responses: List[SupportResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TicketCreate(BaseModel):
    user_id: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)


class ResponseCreate(BaseModel):
    responder_id: Optional[str] = None
    responder_role: str = UserRole.USER.value
    message: Optional[str] = None
    is_internal: bool = False
    attachments: List[str] = Field(default_factory=list)


class TicketStatusUpdate(BaseModel):
    status: str
    resolution: Optional[str] = None
    moderator_notes: Optional[str] = None


class TicketAssign(BaseModel):
    moderator_id: str


class ResponseBody(BaseModel):
    """Response payload from the HTTP layer; the responder is the caller."""
    message: str
    is_internal: bool = False
    attachments: List[str] = Field(default_factory=list)


class TicketStats(BaseModel):
    total_tickets: int = 0
    open_tickets: int = 0
    in_progress_tickets: int = 0
    waiting_user_tickets: int = 0
    resolved_tickets: int = 0
    closed_tickets: int = 0
    average_response_time: float = 0  # hours to first staff reply
    tickets_by_category: Dict[str, int] = Field(default_factory=dict)
