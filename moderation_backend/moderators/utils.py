"""
Moderator registry: who may act on reports and tickets, and with which
capabilities. The registry never becomes empty.
"""

import logging
from typing import Dict, List, Optional
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.core.errors import ValidationError, NotFound, InvariantViolation
from moderation_backend.authentication.schemas import UserRole
from moderation_backend.permissions.schemas import Permission
from moderation_backend.permissions.utils import require_permission
from moderation_backend.moderators import schemas

logger = logging.getLogger("moderation_backend.moderators")


def _validate_permissions(permissions) -> List[Permission]:
    if permissions is None or not isinstance(permissions, (list, tuple, set)):
        raise ValidationError("Permissions must be a list")

    allowed = {p.value for p in Permission}
    values = [p.value if isinstance(p, Permission) else p for p in permissions]
    invalid = [str(p) for p in values if p not in allowed]
    if invalid:
        raise ValidationError(f"Invalid permissions: {', '.join(invalid)}")
    if not values:
        raise ValidationError("At least one permission is required")

    # dedupe, keep caller order
    return [Permission(p) for p in dict.fromkeys(values)]


def get_moderator(engine: ModerationEngine, user_id: str) -> Optional[schemas.Moderator]:
    record = engine.moderators.get(user_id) if user_id else None
    return schemas.Moderator(**record) if record else None


def require_moderator(engine: ModerationEngine, user_id: Optional[str]) -> schemas.Moderator:
    """Fetch a registered moderator/admin or raise NotFound."""
    if not user_id:
        raise ValidationError("Moderator ID is required")
    moderator = get_moderator(engine, user_id)
    if moderator is None:
        logger.warning("Moderator not found: %s", user_id)
        raise NotFound("Moderator not found")
    return moderator


def list_moderators(engine: ModerationEngine) -> List[schemas.Moderator]:
    return [schemas.Moderator(**m) for m in engine.moderators.all()]


def add_moderator(
    engine: ModerationEngine,
    user: schemas.UserProfile,
    permissions,
    actor_id: Optional[str] = None,
) -> schemas.Moderator:
    """Register `user` as a moderator with the given capability set."""
    with engine.transaction():
        if actor_id is not None:
            require_permission(engine, actor_id, Permission.MANAGE_MODERATORS)
        if not user or not user.user_id:
            raise ValidationError("User ID is required")
        if user.user_id in engine.moderators:
            raise InvariantViolation("User is already a moderator")
        validated = _validate_permissions(permissions)

        moderator = schemas.Moderator(
            user_id=user.user_id,
            username=user.username,
            email=user.email,
            role=UserRole.MODERATOR,
            moderator_info=schemas.ModeratorInfo(
                assigned_date=engine.now(),
                permissions=validated,
            ),
        )
        engine.moderators.put(moderator.model_dump(mode="json"))

    logger.info("Moderator added: %s (%s)", moderator.user_id, ", ".join(p.value for p in validated))
    return moderator


def register_admin(engine: ModerationEngine, user: schemas.UserProfile) -> schemas.Moderator:
    """Register an admin entry. Re-registering an existing admin is a no-op."""
    with engine.transaction():
        existing = get_moderator(engine, user.user_id)
        if existing is not None:
            if existing.role != UserRole.ADMIN:
                raise InvariantViolation("User is already registered as a moderator")
            return existing

        admin = schemas.Moderator(
            user_id=user.user_id,
            username=user.username,
            email=user.email,
            role=UserRole.ADMIN,
        )
        engine.moderators.put(admin.model_dump(mode="json"))

    logger.info("Admin registered: %s", admin.user_id)
    return admin


def remove_moderator(engine: ModerationEngine, user_id: str, actor_id: Optional[str] = None) -> None:
    with engine.transaction():
        if actor_id is not None:
            require_permission(engine, actor_id, Permission.MANAGE_MODERATORS)
        require_moderator(engine, user_id)
        if len(engine.moderators) <= 1:
            raise InvariantViolation("Cannot remove the last moderator")
        engine.moderators.delete(user_id)

    logger.info("Moderator removed: %s", user_id)


def update_moderator_permissions(
    engine: ModerationEngine,
    user_id: str,
    permissions,
    actor_id: Optional[str] = None,
) -> schemas.Moderator:
    """Replace a moderator's capability set wholesale."""
    with engine.transaction():
        if actor_id is not None:
            require_permission(engine, actor_id, Permission.MANAGE_MODERATORS)
        moderator = require_moderator(engine, user_id)
        if moderator.moderator_info is None:
            raise NotFound("Moderator not found")
        moderator.moderator_info.permissions = _validate_permissions(permissions)
        engine.moderators.put(moderator.model_dump(mode="json"))

    logger.info("Moderator %s permissions updated", user_id)
    return moderator


def refresh_performance_counters(engine: ModerationEngine, moderator_stats: Dict[str, dict]) -> None:
    """Copy derived per-moderator figures onto the registry entries."""
    for record in engine.moderators.all():
        info = record.get("moderator_info")
        figures = moderator_stats.get(record["user_id"])
        if not info or not figures:
            continue
        if (info.get("handled_reports"), info.get("average_response_time")) == (
            figures["handled_reports"], figures["average_response_time"]
        ):
            continue
        info["handled_reports"] = figures["handled_reports"]
        info["average_response_time"] = figures["average_response_time"]
        engine.moderators.put(record)
