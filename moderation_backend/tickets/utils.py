"""
Support ticket lifecycle: intake, status changes, assignment and threaded
responses. Responses are append-only and keep insertion order.
"""

import logging
from typing import List, Optional
from moderation_backend.core.engine import ModerationEngine, new_id
from moderation_backend.core.errors import ValidationError, NotFound, PermissionDenied
from moderation_backend.core.validation import require_id, require_text, optional_text, require_enum
from moderation_backend.authentication.schemas import UserRole, STAFF_ROLES
from moderation_backend.permissions.schemas import Permission
from moderation_backend.permissions.utils import require_permission
from moderation_backend.moderators.utils import require_moderator
from moderation_backend.reports.schemas import ReportPriority
from moderation_backend.stats.utils import round_one_decimal
from moderation_backend.tickets import schemas
from moderation_backend.tickets.schemas import TicketStatus, SupportCategory, CLOSED_TICKET_STATUSES

logger = logging.getLogger("moderation_backend.tickets")

SECONDS_PER_HOUR = 60 * 60


def _load(engine: ModerationEngine, ticket_id: str) -> schemas.SupportTicket:
    require_id(ticket_id, "Ticket ID")
    record = engine.support_tickets.get(ticket_id)
    if record is None:
        logger.warning("Ticket not found: %s", ticket_id)
        raise NotFound("Ticket not found")
    return schemas.SupportTicket(**record)


def _save(engine: ModerationEngine, ticket: schemas.SupportTicket) -> schemas.SupportTicket:
    engine.support_tickets.put(ticket.model_dump(mode="json"))
    return ticket


def _touch(engine: ModerationEngine, ticket: schemas.SupportTicket) -> None:
    ticket.updated_at = max(engine.now(), ticket.created_at)


def create_support_ticket(engine: ModerationEngine, payload: schemas.TicketCreate) -> schemas.SupportTicket:
    with engine.transaction():
        user_id = require_id(payload.user_id, "User ID")
        subject = require_text(payload.subject, "Subject", 5, 200)
        message = require_text(payload.message, "Message", 10, 2000)
        category = require_enum(payload.category, SupportCategory, "category")
        priority = (
            require_enum(payload.priority, ReportPriority, "priority")
            if payload.priority
            else ReportPriority.medium
        )

        now = engine.now()
        ticket = schemas.SupportTicket(
            id=new_id("ticket"),
            user_id=user_id,
            subject=subject,
            message=message,
            category=category,
            priority=priority,
            status=TicketStatus.open,
            attachments=list(payload.attachments),
            responses=[],
            created_at=now,
            updated_at=now,
        )
        _save(engine, ticket)

    logger.info("Ticket created: %s (%s) by %s", ticket.id, ticket.category.value, user_id)
    return ticket


def update_ticket_status(
    engine: ModerationEngine,
    ticket_id: str,
    status,
    moderator_id: Optional[str] = None,
    resolution: Optional[str] = None,
    notes: Optional[str] = None,
) -> schemas.SupportTicket:
    """Set any ticket status. Resolving or closing needs a resolution on record."""
    with engine.transaction():
        ticket = _load(engine, ticket_id)
        new_status = require_enum(status, TicketStatus, "status")
        if moderator_id:
            require_moderator(engine, moderator_id)
            require_permission(engine, moderator_id, Permission.MANAGE_TICKETS)
        trimmed_resolution = optional_text(resolution, "Resolution", 1000)
        trimmed_notes = optional_text(notes, "Moderator notes", 1000)

        if new_status in CLOSED_TICKET_STATUSES and not (trimmed_resolution or ticket.resolution):
            raise ValidationError("Resolution is required when resolving or closing a ticket")

        ticket.status = new_status
        if trimmed_resolution:
            ticket.resolution = trimmed_resolution
        if trimmed_notes:
            ticket.moderator_notes = trimmed_notes
        _touch(engine, ticket)
        _save(engine, ticket)

    logger.info("Ticket %s status -> %s", ticket.id, new_status.value)
    return ticket


def assign_ticket_to_moderator(engine: ModerationEngine, ticket_id: str, moderator_id: str) -> schemas.SupportTicket:
    with engine.transaction():
        ticket = _load(engine, ticket_id)
        require_moderator(engine, moderator_id)
        require_permission(engine, moderator_id, Permission.MANAGE_TICKETS)

        ticket.assigned_moderator_id = moderator_id
        ticket.status = TicketStatus.in_progress
        _touch(engine, ticket)
        _save(engine, ticket)

    logger.info("Ticket %s assigned to %s", ticket.id, moderator_id)
    return ticket


def add_ticket_response(
    engine: ModerationEngine,
    ticket_id: str,
    payload: schemas.ResponseCreate,
) -> schemas.SupportResponse:
    """
    Append a response to the ticket thread.

    Staff need `manage_tickets`; other users may only answer their own
    tickets. The first staff reply on an open ticket also assigns it.
    """
    with engine.transaction():
        ticket = _load(engine, ticket_id)
        message = require_text(payload.message, "Response", 5, 2000)
        responder_id = require_id(payload.responder_id, "Responder ID")
        role = require_enum(payload.responder_role or UserRole.USER.value, UserRole, "responder role")
        is_staff = role in STAFF_ROLES

        if is_staff:
            require_permission(engine, responder_id, Permission.MANAGE_TICKETS)
        else:
            if responder_id != ticket.user_id:
                logger.warning("User %s tried to respond to ticket %s", responder_id, ticket.id)
                raise PermissionDenied("You cannot respond to this ticket")
            if payload.is_internal:
                raise ValidationError("Only staff can post internal notes")

        response = schemas.SupportResponse(
            id=new_id("response"),
            ticket_id=ticket.id,
            responder_id=responder_id,
            responder_role=role,
            message=message,
            is_internal=payload.is_internal,
            attachments=list(payload.attachments),
            created_at=engine.now(),
        )
        ticket.responses.append(response)

        if is_staff and ticket.status == TicketStatus.open:
            ticket.status = TicketStatus.in_progress
            ticket.assigned_moderator_id = responder_id
        elif not is_staff and ticket.status == TicketStatus.waiting_user:
            ticket.status = TicketStatus.in_progress
        _touch(engine, ticket)
        _save(engine, ticket)

    logger.info("Ticket %s response added by %s (%s)", ticket.id, responder_id, role.value)
    return response


# ────────────────────────────────
# Read accessors
# ────────────────────────────────
def get_ticket(engine: ModerationEngine, ticket_id: str) -> Optional[schemas.SupportTicket]:
    record = engine.support_tickets.get(ticket_id)
    return schemas.SupportTicket(**record) if record else None


def list_tickets(engine: ModerationEngine) -> List[schemas.SupportTicket]:
    tickets = [schemas.SupportTicket(**t) for t in engine.support_tickets.all()]
    return sorted(tickets, key=lambda t: t.created_at, reverse=True)


def get_tickets_by_status(engine: ModerationEngine, status) -> List[schemas.SupportTicket]:
    wanted = require_enum(status, TicketStatus, "status")
    return [t for t in list_tickets(engine) if t.status == wanted]


def get_tickets_by_moderator(engine: ModerationEngine, moderator_id: str) -> List[schemas.SupportTicket]:
    return [t for t in list_tickets(engine) if t.assigned_moderator_id == moderator_id]


def get_tickets_for_user(engine: ModerationEngine, user_id: str) -> List[schemas.SupportTicket]:
    """A user's own tickets, without staff-internal notes."""
    tickets = [t for t in list_tickets(engine) if t.user_id == user_id]
    for ticket in tickets:
        ticket.responses = [r for r in ticket.responses if not r.is_internal]
    return tickets


def _first_staff_reply_hours(ticket: schemas.SupportTicket) -> Optional[float]:
    for response in ticket.responses:
        if response.responder_role in STAFF_ROLES:
            delta = (response.created_at - ticket.created_at).total_seconds()
            return delta / SECONDS_PER_HOUR if delta >= 0 else None
    return None


def get_ticket_stats(engine: ModerationEngine) -> schemas.TicketStats:
    tickets = list_tickets(engine)
    reply_times = [h for h in (_first_staff_reply_hours(t) for t in tickets) if h is not None]
    by_status = {s: sum(1 for t in tickets if t.status == s) for s in TicketStatus}

    return schemas.TicketStats(
        total_tickets=len(tickets),
        open_tickets=by_status[TicketStatus.open],
        in_progress_tickets=by_status[TicketStatus.in_progress],
        waiting_user_tickets=by_status[TicketStatus.waiting_user],
        resolved_tickets=by_status[TicketStatus.resolved],
        closed_tickets=by_status[TicketStatus.closed],
        average_response_time=round_one_decimal(sum(reply_times) / max(len(reply_times), 1)),
        tickets_by_category={c.value: sum(1 for t in tickets if t.category == c) for c in SupportCategory},
    )
