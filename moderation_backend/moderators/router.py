from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from moderation_backend.moderators import utils, schemas
from moderation_backend.authentication.security import require_staff
from moderation_backend.core.dependencies import get_engine
from moderation_backend.core.errors import ModerationError, http_error

router = APIRouter(prefix="/moderators", tags=["Moderators"])


@router.get("/", response_model=List[schemas.Moderator])
def list_moderators(user=Depends(require_staff), engine=Depends(get_engine)):
    return utils.list_moderators(engine)


@router.get("/{user_id}", response_model=schemas.Moderator)
def get_moderator(user_id: str, user=Depends(require_staff), engine=Depends(get_engine)):
    moderator = utils.get_moderator(engine, user_id)
    if not moderator:
        raise HTTPException(status_code=404, detail="Moderator not found.")
    return moderator


@router.post("/", response_model=schemas.Moderator, status_code=status.HTTP_201_CREATED)
def add_moderator(body: schemas.ModeratorCreate, user=Depends(require_staff), engine=Depends(get_engine)):
    """Promote a user to moderator (requires manage_moderators)."""
    profile = schemas.UserProfile(user_id=body.user_id, username=body.username, email=body.email)
    try:
        return utils.add_moderator(engine, profile, body.permissions, actor_id=user.user_id)
    except ModerationError as e:
        raise http_error(e)


@router.put("/{user_id}/permissions", response_model=schemas.Moderator)
def update_permissions(
    user_id: str,
    body: schemas.PermissionsUpdate,
    user=Depends(require_staff),
    engine=Depends(get_engine),
):
    try:
        return utils.update_moderator_permissions(engine, user_id, body.permissions, actor_id=user.user_id)
    except ModerationError as e:
        raise http_error(e)


@router.delete("/{user_id}")
def remove_moderator(user_id: str, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        utils.remove_moderator(engine, user_id, actor_id=user.user_id)
    except ModerationError as e:
        raise http_error(e)
    return {"message": f"Moderator {user_id} removed."}
