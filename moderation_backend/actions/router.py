from fastapi import APIRouter, Depends
from typing import List
from moderation_backend.actions import utils, schemas
from moderation_backend.authentication.security import require_staff
from moderation_backend.core.dependencies import get_engine
from moderation_backend.core.errors import ModerationError, http_error

router = APIRouter(prefix="/actions", tags=["Moderation Actions"])


@router.post("/", response_model=schemas.ModerationAction)
def create_action(action: schemas.ActionCreate, user=Depends(require_staff), engine=Depends(get_engine)):
    """Record a warning/ban/removal issued by the calling moderator."""
    payload = action.model_copy(update={"moderator_id": user.user_id})
    try:
        return utils.create_moderation_action(engine, payload)
    except ModerationError as e:
        raise http_error(e)


@router.post("/expire", response_model=List[schemas.ModerationAction])
def expire_actions(user=Depends(require_staff), engine=Depends(get_engine)):
    return utils.expire_moderation_actions(engine)


@router.patch("/{action_id}/deactivate", response_model=schemas.ModerationAction)
def deactivate_action(action_id: str, user=Depends(require_staff), engine=Depends(get_engine)):
    try:
        return utils.deactivate_moderation_action(engine, action_id)
    except ModerationError as e:
        raise http_error(e)


@router.get("/users/{user_id}", response_model=List[schemas.ModerationAction])
def user_history(user_id: str, user=Depends(require_staff), engine=Depends(get_engine)):
    return utils.get_user_moderation_history(engine, user_id)
