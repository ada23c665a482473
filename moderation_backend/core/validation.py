from enum import Enum
from typing import Optional, Type, TypeVar
from moderation_backend.core.errors import ValidationError

E = TypeVar("E", bound=Enum)


def require_id(value: Optional[str], label: str) -> str:
    """Return the id, or raise if it is missing or blank."""
    if not value or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value


def optional_id(value: Optional[str]) -> Optional[str]:
    """Blank ids count as absent."""
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    return value


def require_text(value: Optional[str], label: str, min_len: int, max_len: int) -> str:
    """Trim `value` and check its length is within [min_len, max_len]."""
    if not value or not isinstance(value, str):
        raise ValidationError(f"{label} is required")
    trimmed = value.strip()
    if len(trimmed) < min_len:
        raise ValidationError(f"{label} must be at least {min_len} characters")
    if len(trimmed) > max_len:
        raise ValidationError(f"{label} cannot exceed {max_len} characters")
    return trimmed


def optional_text(value: Optional[str], label: str, max_len: int) -> Optional[str]:
    """Trim an optional field; empty text collapses to None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be text")
    trimmed = value.strip()
    if len(trimmed) > max_len:
        raise ValidationError(f"{label} cannot exceed {max_len} characters")
    return trimmed or None


def require_enum(value, enum_cls: Type[E], label: str) -> E:
    if value is None or value == "":
        raise ValidationError(f"{label.capitalize()} is required")
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}' (expected one of: {allowed})")
