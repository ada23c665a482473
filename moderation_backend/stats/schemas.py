from pydantic import BaseModel, Field
from typing import Dict
from moderation_backend.reports.schemas import ReportType, ReportPriority


def _zero_counts(enum_cls) -> Dict[str, int]:
    return {member.value: 0 for member in enum_cls}


class ModeratorPerformance(BaseModel):
    handled_reports: int = 0
    average_response_time: float = 0  # hours
    resolution_rate: float = 0  # percent


class ModerationStats(BaseModel):
    total_reports: int = 0
    pending_reports: int = 0
    in_review_reports: int = 0
    resolved_reports: int = 0
    dismissed_reports: int = 0
    average_resolution_time: float = 0  # hours
    reports_by_type: Dict[str, int] = Field(default_factory=lambda: _zero_counts(ReportType))
    reports_by_priority: Dict[str, int] = Field(default_factory=lambda: _zero_counts(ReportPriority))
    moderator_stats: Dict[str, ModeratorPerformance] = Field(default_factory=dict)
