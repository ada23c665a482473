"""
Derives ModerationStats from the current report and moderator collections.

Stats are rebuilt from scratch after every report mutation. Timestamps that
produce a negative, non-finite or incomparable delta are skipped rather than
failing the whole recomputation.
"""

import math, logging
from typing import Iterable, List
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.reports.schemas import Report, ReportStatus, ReportType, ReportPriority
from moderation_backend.moderators.utils import refresh_performance_counters
from moderation_backend.stats import schemas

logger = logging.getLogger("moderation_backend.stats")

MS_PER_HOUR = 1000 * 60 * 60


def round_one_decimal(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def average_hours(reports: List[Report]) -> float:
    """Mean created->updated time in hours; 0 when there are no reports."""
    if not reports:
        return 0
    total_ms = 0.0
    for report in reports:
        try:
            delta_ms = (report.updated_at - report.created_at).total_seconds() * 1000
        except TypeError:
            logger.debug("Skipping report %s: incomparable timestamps", report.id)
            continue
        if delta_ms < 0 or not math.isfinite(delta_ms):
            logger.debug("Skipping report %s: invalid resolution delta", report.id)
            continue
        total_ms += delta_ms
    return round_one_decimal(total_ms / max(len(reports), 1) / MS_PER_HOUR)


def _count(reports: Iterable[Report], predicate) -> int:
    return sum(1 for r in reports if predicate(r))


def compute_stats(reports: List[Report], moderator_ids: List[str]) -> schemas.ModerationStats:
    resolved = [r for r in reports if r.status == ReportStatus.resolved]

    moderator_stats = {}
    for moderator_id in moderator_ids:
        assigned = [r for r in reports if r.assigned_moderator_id == moderator_id]
        handled = [r for r in assigned if r.status == ReportStatus.resolved]
        rate = round_one_decimal(len(handled) / len(assigned) * 100) if assigned else 0
        moderator_stats[moderator_id] = schemas.ModeratorPerformance(
            handled_reports=len(handled),
            average_response_time=average_hours(handled),
            resolution_rate=rate,
        )

    return schemas.ModerationStats(
        total_reports=len(reports),
        pending_reports=_count(reports, lambda r: r.status == ReportStatus.pending),
        in_review_reports=_count(reports, lambda r: r.status == ReportStatus.in_review),
        resolved_reports=len(resolved),
        dismissed_reports=_count(reports, lambda r: r.status == ReportStatus.dismissed),
        average_resolution_time=average_hours(resolved),
        reports_by_type={t.value: _count(reports, lambda r, t=t: r.type == t) for t in ReportType},
        reports_by_priority={p.value: _count(reports, lambda r, p=p: r.priority == p) for p in ReportPriority},
        moderator_stats=moderator_stats,
    )


def recompute_stats(engine: ModerationEngine) -> schemas.ModerationStats:
    """Rebuild engine.stats and sync the registry's performance counters."""
    with engine.transaction():
        reports = [Report(**r) for r in engine.reports.all()]
        moderator_ids = [m["user_id"] for m in engine.moderators.all()]
        stats = compute_stats(reports, moderator_ids)
        engine.stats = stats
        refresh_performance_counters(
            engine, {mid: perf.model_dump() for mid, perf in stats.moderator_stats.items()}
        )
    return stats


def get_stats(engine: ModerationEngine) -> schemas.ModerationStats:
    return engine.stats.model_copy(deep=True)
