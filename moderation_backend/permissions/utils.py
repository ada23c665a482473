"""
Capability checks against the moderator registry.

Admins implicitly hold every capability; that rule lives only in
`has_permission`, and every restricted mutation goes through
`require_permission`.
"""

import logging
from typing import Optional, Union
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.core.errors import PermissionDenied
from moderation_backend.authentication.schemas import UserRole
from moderation_backend.permissions.schemas import Permission

logger = logging.getLogger("moderation_backend.permissions")


def _capability_name(capability: Union[Permission, str]) -> str:
    return capability.value if isinstance(capability, Permission) else str(capability)


def has_permission(engine: ModerationEngine, actor_id: Optional[str], capability: Union[Permission, str]) -> bool:
    """Return True if the registered actor holds `capability`."""
    if not actor_id:
        return False
    record = engine.moderators.get(actor_id)
    if record is None:
        return False

    role = record.get("role")
    if role == UserRole.ADMIN.value:
        return True
    if role == UserRole.MODERATOR.value and record.get("moderator_info"):
        return _capability_name(capability) in record["moderator_info"].get("permissions", [])
    return False


def require_permission(engine: ModerationEngine, actor_id: Optional[str], capability: Union[Permission, str]) -> None:
    """Raise PermissionDenied unless the actor holds `capability`."""
    if not has_permission(engine, actor_id, capability):
        name = _capability_name(capability)
        logger.warning("Permission %s denied for %s", name, actor_id)
        raise PermissionDenied(f"Permission denied: {name}", capability=name)
