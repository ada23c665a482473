"""
Support ticket routes. Users open and follow their own tickets; staff triage,
assign and close them.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from moderation_backend.tickets import utils, schemas
from moderation_backend.authentication.security import get_current_user, require_staff
from moderation_backend.core.dependencies import get_engine
from moderation_backend.core.errors import ModerationError, http_error

router = APIRouter(prefix="/tickets", tags=["Support"])


@router.post("/", response_model=schemas.SupportTicket, status_code=status.HTTP_201_CREATED)
def create_ticket(ticket: schemas.TicketCreate, user=Depends(get_current_user), engine=Depends(get_engine)):
    payload = ticket.model_copy(update={"user_id": user.user_id})
    try:
        return utils.create_support_ticket(engine, payload)
    except ModerationError as e:
        raise http_error(e)


@router.get("/mine", response_model=List[schemas.SupportTicket])
def get_my_tickets(user=Depends(get_current_user), engine=Depends(get_engine)):
    return utils.get_tickets_for_user(engine, user.user_id)


@router.get("/stats", response_model=schemas.TicketStats)
def get_ticket_stats(user=Depends(require_staff), engine=Depends(get_engine)):
    return utils.get_ticket_stats(engine)


@router.get("/", response_model=List[schemas.SupportTicket])
def get_tickets(
    ticket_status: Optional[str] = Query(None, alias="status"),
    moderator_id: Optional[str] = Query(None),
    user=Depends(require_staff),
    engine=Depends(get_engine),
):
    try:
        tickets = utils.get_tickets_by_status(engine, ticket_status) if ticket_status else utils.list_tickets(engine)
    except ModerationError as e:
        raise http_error(e)
    if moderator_id:
        tickets = [t for t in tickets if t.assigned_moderator_id == moderator_id]
    return tickets


@router.get("/{ticket_id}", response_model=schemas.SupportTicket)
def get_ticket(ticket_id: str, user=Depends(get_current_user), engine=Depends(get_engine)):
    """Owner or staff only; owners never see internal notes."""
    ticket = utils.get_ticket(engine, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found.")
    if user.is_staff:
        return ticket
    if ticket.user_id != user.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized.")
    ticket.responses = [r for r in ticket.responses if not r.is_internal]
    return ticket


@router.patch("/{ticket_id}/status", response_model=schemas.SupportTicket)
def update_ticket_status(
    ticket_id: str,
    update: schemas.TicketStatusUpdate,
    user=Depends(require_staff),
    engine=Depends(get_engine),
):
    try:
        return utils.update_ticket_status(
            engine,
            ticket_id,
            update.status,
            moderator_id=user.user_id,
            resolution=update.resolution,
            notes=update.moderator_notes,
        )
    except ModerationError as e:
        raise http_error(e)


@router.post("/{ticket_id}/assign", response_model=schemas.SupportTicket)
def assign_ticket(ticket_id: str, body: schemas.TicketAssign, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        return utils.assign_ticket_to_moderator(engine, ticket_id, body.moderator_id)
    except ModerationError as e:
        raise http_error(e)


@router.post("/{ticket_id}/responses", response_model=schemas.SupportResponse, status_code=status.HTTP_201_CREATED)
def add_response(ticket_id: str, body: schemas.ResponseBody, user=Depends(get_current_user), engine=Depends(get_engine)):
    """Reply on a ticket as the calling user."""
    payload = schemas.ResponseCreate(
        responder_id=user.user_id,
        responder_role=user.role.value,
        message=body.message,
        is_internal=body.is_internal,
        attachments=body.attachments,
    )
    try:
        return utils.add_ticket_response(engine, ticket_id, payload)
    except ModerationError as e:
        raise http_error(e)
