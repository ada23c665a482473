"""
ModerationEngine owns the collections every moderation operation works on.

Mutating operations wrap validate -> mutate -> recompute in `transaction()`,
so two callers can never both act on the same stale record.
"""

import os, uuid, threading, logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Optional
from moderation_backend.core.storage import RecordStore, InMemoryRecordStore, JsonRecordStore
from moderation_backend.core.config import Settings
from moderation_backend.stats.schemas import ModerationStats

logger = logging.getLogger("moderation_backend.engine")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class ModerationEngine:
    def __init__(
        self,
        reports: Optional[RecordStore] = None,
        support_tickets: Optional[RecordStore] = None,
        moderators: Optional[RecordStore] = None,
        moderation_actions: Optional[RecordStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.reports = reports if reports is not None else InMemoryRecordStore()
        self.support_tickets = support_tickets if support_tickets is not None else InMemoryRecordStore()
        self.moderators = moderators if moderators is not None else InMemoryRecordStore(key="user_id")
        self.moderation_actions = moderation_actions if moderation_actions is not None else InMemoryRecordStore()
        self.clock = clock or utcnow
        self.stats = ModerationStats()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self):
        """Serialize a read-modify-write sequence against the collections."""
        with self._lock:
            yield self

    def now(self) -> datetime:
        return self.clock()


def build_engine(settings: Settings) -> ModerationEngine:
    """Create an engine with the storage backend selected in settings."""
    if settings.storage_backend == "json":
        base = settings.data_dir
        logger.info("Using JSON record stores under %s", base)
        return ModerationEngine(
            reports=JsonRecordStore(os.path.join(base, "reports.json")),
            support_tickets=JsonRecordStore(os.path.join(base, "support_tickets.json")),
            moderators=JsonRecordStore(os.path.join(base, "moderators.json"), key="user_id"),
            moderation_actions=JsonRecordStore(os.path.join(base, "moderation_actions.json")),
        )
    return ModerationEngine()
