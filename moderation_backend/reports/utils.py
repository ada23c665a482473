"""
Report lifecycle: intake, assignment, resolution and dismissal.

pending -> in_review -> resolved | dismissed, with a direct path from
pending. The generic status update may move a report between any states,
but closing one always needs a resolution text and `manage_reports`.
"""

import logging
from typing import List, Optional
from moderation_backend.core.engine import ModerationEngine, new_id
from moderation_backend.core.errors import ValidationError, NotFound
from moderation_backend.core.validation import require_id, optional_id, require_text, optional_text, require_enum
from moderation_backend.permissions.schemas import Permission
from moderation_backend.permissions.utils import require_permission
from moderation_backend.moderators.utils import require_moderator
from moderation_backend.stats.utils import recompute_stats
from moderation_backend.reports import schemas
from moderation_backend.reports.schemas import ReportStatus, ReportType, ReportPriority, CLOSED_STATUSES

logger = logging.getLogger("moderation_backend.reports")


# ────────────────────────────────
# Record helpers
# ────────────────────────────────
def _load(engine: ModerationEngine, report_id: str) -> schemas.Report:
    require_id(report_id, "Report ID")
    record = engine.reports.get(report_id)
    if record is None:
        logger.warning("Report not found: %s", report_id)
        raise NotFound("Report not found")
    return schemas.Report(**record)


def _save(engine: ModerationEngine, report: schemas.Report) -> schemas.Report:
    engine.reports.put(report.model_dump(mode="json"))
    return report


def _touch(engine: ModerationEngine, report: schemas.Report) -> None:
    report.updated_at = max(engine.now(), report.created_at)


def _newest_first(reports: List[schemas.Report]) -> List[schemas.Report]:
    return sorted(reports, key=lambda r: r.created_at, reverse=True)


# ────────────────────────────────
# Lifecycle operations
# ────────────────────────────────
def create_report(engine: ModerationEngine, payload: schemas.ReportCreate) -> schemas.Report:
    """Validate and persist a new pending report."""
    with engine.transaction():
        reporter_id = require_id(payload.reporter_id, "Reporter ID")
        user_id = optional_id(payload.reported_user_id)
        listing_id = optional_id(payload.reported_listing_id)
        store_id = optional_id(payload.reported_store_id)
        if not (user_id or listing_id or store_id):
            raise ValidationError("At least one target (user, listing or store) is required")
        report_type = require_enum(payload.type, ReportType, "report type")
        reason = require_text(payload.reason, "Reason", 10, 1000)
        description = optional_text(payload.description, "Description", 2000)
        priority = (
            require_enum(payload.priority, ReportPriority, "priority")
            if payload.priority
            else ReportPriority.medium
        )

        now = engine.now()
        report = schemas.Report(
            id=new_id("report"),
            reporter_id=reporter_id,
            reported_user_id=user_id,
            reported_listing_id=listing_id,
            reported_store_id=store_id,
            type=report_type,
            reason=reason,
            description=description,
            priority=priority,
            status=ReportStatus.pending,
            evidence=list(payload.evidence),
            created_at=now,
            updated_at=now,
        )
        _save(engine, report)
        recompute_stats(engine)

    logger.info("Report created: %s (%s, %s)", report.id, report.type.value, report.priority.value)
    return report


def update_report_status(
    engine: ModerationEngine,
    report_id: str,
    status,
    moderator_id: Optional[str] = None,
    notes: Optional[str] = None,
    resolution: Optional[str] = None,
) -> schemas.Report:
    """Move a report to any status; closing it goes through resolve/dismiss."""
    with engine.transaction():
        report = _load(engine, report_id)
        new_status = require_enum(status, ReportStatus, "status")
        if moderator_id:
            require_moderator(engine, moderator_id)
            require_permission(engine, moderator_id, Permission.MANAGE_REPORTS)
        trimmed_notes = optional_text(notes, "Moderator notes", 1000)

        if new_status in CLOSED_STATUSES:
            if not resolution or not resolution.strip():
                raise ValidationError("Resolution is required when resolving or dismissing a report")
            if not moderator_id:
                raise ValidationError("Moderator ID is required when resolving or dismissing a report")
            return _close_report(engine, report_id, new_status, resolution, moderator_id, trimmed_notes)

        report.status = new_status
        if moderator_id:
            report.assigned_moderator_id = moderator_id
        if trimmed_notes:
            report.moderator_notes = trimmed_notes
        # Reopened reports lose their resolution
        report.resolution = None
        _touch(engine, report)
        _save(engine, report)
        recompute_stats(engine)

    logger.info("Report %s status -> %s", report.id, new_status.value)
    return report


def assign_report_to_moderator(engine: ModerationEngine, report_id: str, moderator_id: str) -> schemas.Report:
    """Dispatch a report to a moderator; the report moves to in_review."""
    with engine.transaction():
        report = _load(engine, report_id)
        require_moderator(engine, moderator_id)

        if report.status == ReportStatus.in_review and report.assigned_moderator_id == moderator_id:
            return report

        report.assigned_moderator_id = moderator_id
        report.status = ReportStatus.in_review
        report.resolution = None
        _touch(engine, report)
        _save(engine, report)
        recompute_stats(engine)

    logger.info("Report %s assigned to %s", report.id, moderator_id)
    return report


def _close_report(
    engine: ModerationEngine,
    report_id: str,
    status: ReportStatus,
    text: Optional[str],
    moderator_id: str,
    notes: Optional[str] = None,
) -> schemas.Report:
    with engine.transaction():
        report = _load(engine, report_id)
        label = "Resolution" if status == ReportStatus.resolved else "Resolution reason"
        resolution = require_text(text, label, 10, 1000)
        require_moderator(engine, moderator_id)
        require_permission(engine, moderator_id, Permission.MANAGE_REPORTS)

        report.status = status
        report.resolution = resolution
        report.assigned_moderator_id = moderator_id
        if notes:
            report.moderator_notes = notes
        _touch(engine, report)
        _save(engine, report)
        recompute_stats(engine)

    logger.info("Report %s %s by %s", report.id, status.value, moderator_id)
    return report


def resolve_report(engine: ModerationEngine, report_id: str, resolution: Optional[str], moderator_id: str) -> schemas.Report:
    return _close_report(engine, report_id, ReportStatus.resolved, resolution, moderator_id)


def dismiss_report(engine: ModerationEngine, report_id: str, reason: Optional[str], moderator_id: str) -> schemas.Report:
    return _close_report(engine, report_id, ReportStatus.dismissed, reason, moderator_id)


# ────────────────────────────────
# Read accessors
# ────────────────────────────────
def get_report(engine: ModerationEngine, report_id: str) -> Optional[schemas.Report]:
    record = engine.reports.get(report_id)
    return schemas.Report(**record) if record else None


def list_reports(engine: ModerationEngine) -> List[schemas.Report]:
    return _newest_first([schemas.Report(**r) for r in engine.reports.all()])


def get_reports_by_status(engine: ModerationEngine, status) -> List[schemas.Report]:
    wanted = require_enum(status, ReportStatus, "status")
    return [r for r in list_reports(engine) if r.status == wanted]


def get_reports_by_moderator(engine: ModerationEngine, moderator_id: str) -> List[schemas.Report]:
    return [r for r in list_reports(engine) if r.assigned_moderator_id == moderator_id]


def get_reports_by_reporter(engine: ModerationEngine, reporter_id: str) -> List[schemas.Report]:
    return [r for r in list_reports(engine) if r.reporter_id == reporter_id]
