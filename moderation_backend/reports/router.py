"""
Handles report intake, retrieval, and moderation actions.
Intake is open to any caller; everything else is moderator/admin only.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from moderation_backend.reports import utils, schemas
from moderation_backend.authentication.security import get_current_user, require_staff
from moderation_backend.core.dependencies import get_engine
from moderation_backend.core.errors import ModerationError, http_error

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/", response_model=schemas.Report, status_code=status.HTTP_201_CREATED)
def submit_report(report: schemas.ReportCreate, user=Depends(get_current_user), engine=Depends(get_engine)):
    """Submit a new report; the caller is always the reporter."""
    payload = report.model_copy(update={"reporter_id": user.user_id})
    try:
        return utils.create_report(engine, payload)
    except ModerationError as e:
        raise http_error(e)


@router.get("/mine", response_model=List[schemas.Report])
def get_my_reports(user=Depends(get_current_user), engine=Depends(get_engine)):
    return utils.get_reports_by_reporter(engine, user.user_id)


@router.get("/", response_model=List[schemas.Report])
def get_reports(
    report_status: Optional[str] = Query(None, alias="status"),
    moderator_id: Optional[str] = Query(None),
    user=Depends(require_staff),
    engine=Depends(get_engine),
):
    """List reports, optionally filtered by status or assigned moderator."""
    try:
        reports = utils.get_reports_by_status(engine, report_status) if report_status else utils.list_reports(engine)
    except ModerationError as e:
        raise http_error(e)
    if moderator_id:
        reports = [r for r in reports if r.assigned_moderator_id == moderator_id]
    return reports


@router.get("/{report_id}", response_model=schemas.Report)
def get_report(report_id: str, user=Depends(require_staff), engine=Depends(get_engine)):
    report = utils.get_report(engine, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found.")
    return report


@router.patch("/{report_id}/status", response_model=schemas.Report)
def update_report_status(
    report_id: str,
    update: schemas.ReportStatusUpdate,
    user=Depends(require_staff),
    engine=Depends(get_engine),
):
    """Change a report's status; closing it requires a resolution."""
    try:
        return utils.update_report_status(
            engine,
            report_id,
            update.status,
            moderator_id=user.user_id,
            notes=update.moderator_notes,
            resolution=update.resolution,
        )
    except ModerationError as e:
        raise http_error(e)


@router.post("/{report_id}/assign", response_model=schemas.Report)
def assign_report(report_id: str, body: schemas.ReportAssign, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        return utils.assign_report_to_moderator(engine, report_id, body.moderator_id)
    except ModerationError as e:
        raise http_error(e)


@router.post("/{report_id}/resolve", response_model=schemas.Report)
def resolve_report(report_id: str, body: schemas.ReportResolve, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        return utils.resolve_report(engine, report_id, body.resolution, user.user_id)
    except ModerationError as e:
        raise http_error(e)


@router.post("/{report_id}/dismiss", response_model=schemas.Report)
def dismiss_report(report_id: str, body: schemas.ReportResolve, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        return utils.dismiss_report(engine, report_id, body.resolution, user.user_id)
    except ModerationError as e:
        raise http_error(e)
