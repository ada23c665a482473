"""
Error taxonomy shared by every moderation operation.

All errors are raised before any record is written, so a failed call never
leaves a partial change behind.
"""

from typing import Optional
from fastapi import HTTPException, status


class ModerationError(Exception):
    """Base class for rule violations raised by the engine."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ModerationError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ModerationError):
    """Referenced report, ticket, moderator or action does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDenied(ModerationError):
    """Actor lacks the capability required for the attempted mutation."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str, capability: Optional[str] = None):
        super().__init__(message)
        self.capability = capability


class InvariantViolation(ModerationError):
    """Structural rule breach, e.g. removing the last moderator."""

    status_code = status.HTTP_409_CONFLICT


def http_error(exc: ModerationError) -> HTTPException:
    """Translate an engine error into the HTTPException a router raises."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)
