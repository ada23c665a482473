"""
Threaded tests: readers running next to writers, racing writers on one
report, and the process-wide engine being built once.
"""

import time
import threading
import pytest
from moderation_backend.core import dependencies
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.moderators.schemas import UserProfile
from moderation_backend.moderators import utils as moderator_utils
from moderation_backend.reports import utils as report_utils
from moderation_backend.reports.schemas import ReportCreate
from moderation_backend.tickets import utils as ticket_utils
from moderation_backend.tickets.schemas import TicketCreate


@pytest.fixture
def engine():
    engine = ModerationEngine()
    moderator_utils.register_admin(engine, UserProfile(user_id="admin1"))
    moderator_utils.add_moderator(engine, UserProfile(user_id="mod1"), ["manage_reports", "manage_tickets"])
    return engine


def _report(n: int) -> ReportCreate:
    return ReportCreate(
        reporter_id=f"u{n}",
        reported_listing_id=f"listing{n}",
        type="spam",
        reason="Same listing posted over and over",
    )


def _run(threads):
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def test_reads_during_writes(engine):
    errors = []
    done = threading.Event()

    def write():
        try:
            for n in range(500):
                report_utils.create_report(engine, _report(n))
                ticket_utils.create_support_ticket(engine, TicketCreate(
                    user_id=f"u{n}", subject="Login fails", message="I cannot log in since this morning.",
                    category="account",
                ))
        finally:
            done.set()

    def read():
        try:
            while not done.is_set():
                report_utils.list_reports(engine)
                ticket_utils.list_tickets(engine)
                ticket_utils.get_ticket_stats(engine)
        except Exception as e:
            errors.append(repr(e))

    _run([threading.Thread(target=write)] + [threading.Thread(target=read) for _ in range(3)])

    assert errors == []
    assert len(report_utils.list_reports(engine)) == 500
    assert len(ticket_utils.list_tickets(engine)) == 500


def test_concurrent_creates_keep_stats_in_step(engine):
    def write(offset):
        for n in range(50):
            report_utils.create_report(engine, _report(offset + n))

    _run([threading.Thread(target=write, args=(i * 50,)) for i in range(4)])

    assert len(engine.reports) == 200
    assert engine.stats.total_reports == 200
    assert engine.stats.pending_reports == 200


def test_racing_resolutions_leave_one_consistent_outcome(engine):
    report = report_utils.create_report(engine, _report(1))
    barrier = threading.Barrier(2)

    def resolve(moderator_id):
        barrier.wait()
        report_utils.resolve_report(engine, report.id, f"Listing removed by {moderator_id}", moderator_id)

    _run([threading.Thread(target=resolve, args=(m,)) for m in ("admin1", "mod1")])

    stored = report_utils.get_report(engine, report.id)
    assert stored.resolution == f"Listing removed by {stored.assigned_moderator_id}"
    assert engine.stats.resolved_reports == 1
    assert engine.stats.pending_reports == 0


def test_get_engine_builds_once(monkeypatch):
    real_build = dependencies.build_engine

    def slow_build(settings):
        time.sleep(0.05)
        return real_build(settings)

    monkeypatch.setattr(dependencies, "build_engine", slow_build)
    monkeypatch.setattr(dependencies, "_engine", None)
    barrier = threading.Barrier(4)
    engines = []

    def fetch():
        barrier.wait()
        engines.append(dependencies.get_engine())

    _run([threading.Thread(target=fetch) for _ in range(4)])

    assert len(engines) == 4
    assert len({id(e) for e in engines}) == 1
