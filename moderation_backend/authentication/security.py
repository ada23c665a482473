"""
Resolves the caller for each request.

Authentication happens upstream; the gateway forwards the verified identity
in the X-User-Id / X-User-Role headers. Only authorization is done here.
"""

from typing import Optional
from fastapi import Header, HTTPException, Depends, status
from moderation_backend.authentication.schemas import TokenData, UserRole


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> TokenData:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity")
    try:
        role = UserRole(x_user_role or UserRole.USER.value)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown caller role")
    return TokenData(user_id=x_user_id, role=role)


def require_staff(current_user: TokenData = Depends(get_current_user)) -> TokenData:
    """Reject callers that are neither moderators nor admins."""
    if not current_user.is_staff:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Moderators only.")
    return current_user
