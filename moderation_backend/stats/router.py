from fastapi import APIRouter, Depends, HTTPException, status
from moderation_backend.stats import utils, schemas
from moderation_backend.authentication.security import require_staff
from moderation_backend.core.dependencies import get_engine
from moderation_backend.permissions.schemas import Permission
from moderation_backend.permissions.utils import has_permission

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/", response_model=schemas.ModerationStats)
def get_stats(user=Depends(require_staff), engine=Depends(get_engine)):
    """Moderation dashboard figures (requires view_analytics)."""
    if not has_permission(engine, user.user_id, Permission.VIEW_ANALYTICS):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied: view_analytics")
    return utils.get_stats(engine)
