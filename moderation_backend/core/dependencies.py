import threading
from typing import Optional
from moderation_backend.core.config import settings
from moderation_backend.core.engine import ModerationEngine, build_engine
from moderation_backend.moderators.schemas import UserProfile
from moderation_backend.moderators.utils import register_admin
from moderation_backend.stats.utils import recompute_stats

_engine: Optional[ModerationEngine] = None
_engine_lock = threading.Lock()


def get_engine() -> ModerationEngine:
    """Process-wide engine, created on first use with the bootstrap admins."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                engine = build_engine(settings)
                for admin_id in settings.bootstrap_admin_ids:
                    register_admin(engine, UserProfile(user_id=admin_id))
                recompute_stats(engine)
                _engine = engine
    return _engine
