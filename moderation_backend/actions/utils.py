"""
Moderation actions (warnings, bans, removals) taken against users, listings
and stores, plus the per-user moderation history.
"""

import logging
from typing import List
from moderation_backend.core.engine import ModerationEngine, new_id
from moderation_backend.core.errors import ValidationError, NotFound
from moderation_backend.core.validation import require_text, require_enum
from moderation_backend.permissions.schemas import Permission
from moderation_backend.permissions.utils import require_permission
from moderation_backend.moderators.utils import require_moderator
from moderation_backend.actions import schemas
from moderation_backend.actions.schemas import ModerationActionType

logger = logging.getLogger("moderation_backend.actions")


def _required_capabilities(payload: schemas.ActionCreate) -> List[Permission]:
    capabilities = []
    if payload.target_user_id:
        capabilities.append(Permission.MANAGE_USERS)
    if payload.target_listing_id:
        capabilities.append(Permission.MANAGE_LISTINGS)
    if payload.target_store_id:
        capabilities.append(Permission.MANAGE_STORES)
    return capabilities


def create_moderation_action(engine: ModerationEngine, payload: schemas.ActionCreate) -> schemas.ModerationAction:
    with engine.transaction():
        require_moderator(engine, payload.moderator_id)
        action_type = require_enum(payload.action, ModerationActionType, "action")
        capabilities = _required_capabilities(payload)
        if not capabilities:
            raise ValidationError("At least one target (user, listing or store) is required")
        reason = require_text(payload.reason, "Reason", 10, 1000)

        if payload.duration_hours is not None and payload.duration_hours <= 0:
            raise ValidationError("Duration must be a positive number of hours")
        if action_type == ModerationActionType.temporary_ban and payload.duration_hours is None:
            raise ValidationError("Duration is required for a temporary ban")
        if payload.report_id and payload.report_id not in engine.reports:
            raise NotFound("Report not found")

        for capability in capabilities:
            require_permission(engine, payload.moderator_id, capability)

        action = schemas.ModerationAction(
            id=new_id("action"),
            moderator_id=payload.moderator_id,
            target_user_id=payload.target_user_id,
            target_listing_id=payload.target_listing_id,
            target_store_id=payload.target_store_id,
            report_id=payload.report_id,
            action=action_type,
            reason=reason,
            duration_hours=payload.duration_hours,
            created_at=engine.now(),
        )
        engine.moderation_actions.put(action.model_dump(mode="json"))

    logger.info("Moderation action %s (%s) by %s", action.id, action.action.value, action.moderator_id)
    return action


def deactivate_moderation_action(engine: ModerationEngine, action_id: str) -> schemas.ModerationAction:
    with engine.transaction():
        record = engine.moderation_actions.get(action_id) if action_id else None
        if record is None:
            raise NotFound("Moderation action not found")
        action = schemas.ModerationAction(**record)
        action.is_active = False
        engine.moderation_actions.put(action.model_dump(mode="json"))

    logger.info("Moderation action %s deactivated", action_id)
    return action


def expire_moderation_actions(engine: ModerationEngine) -> List[schemas.ModerationAction]:
    """Deactivate every active action whose duration has run out."""
    expired = []
    with engine.transaction():
        now = engine.now()
        for record in engine.moderation_actions.all():
            action = schemas.ModerationAction(**record)
            if action.is_active and action.has_expired(now):
                action.is_active = False
                engine.moderation_actions.put(action.model_dump(mode="json"))
                expired.append(action)

    if expired:
        logger.info("Expired %d moderation action(s)", len(expired))
    return expired


def get_user_moderation_history(engine: ModerationEngine, user_id: str) -> List[schemas.ModerationAction]:
    actions = [
        schemas.ModerationAction(**a)
        for a in engine.moderation_actions.all()
        if a.get("target_user_id") == user_id
    ]
    return sorted(actions, key=lambda a: a.created_at, reverse=True)
