"""
Tests for the record stores and the JSON-backed engine.
"""

import json
import pytest
from moderation_backend.core.config import Settings
from moderation_backend.core.engine import build_engine
from moderation_backend.core.storage import RecordStore, InMemoryRecordStore, JsonRecordStore
from moderation_backend.moderators.schemas import UserProfile
from moderation_backend.moderators import utils as moderator_utils
from moderation_backend.reports import utils as report_utils
from moderation_backend.reports.schemas import ReportCreate


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryRecordStore()
    return JsonRecordStore(str(tmp_path / "records.json"))


def test_put_get_update_delete(store):
    store.put({"id": "a", "value": 1})
    store.put({"id": "b", "value": 2})
    store.put({"id": "a", "value": 3})

    assert len(store) == 2
    assert store.get("a") == {"id": "a", "value": 3}
    assert "b" in store
    assert store.delete("b") is True
    assert store.delete("b") is False
    assert store.get("b") is None


def test_reads_are_copies(store):
    store.put({"id": "a", "tags": ["x"]})
    record = store.get("a")
    record["tags"].append("y")
    assert store.get("a")["tags"] == ["x"]


def test_json_store_handles_corrupt_file(tmp_path):
    path = tmp_path / "records.json"
    path.write_text("{not json")
    assert JsonRecordStore(str(path)).all() == []


def test_json_engine_persists_between_instances(tmp_path):
    settings = Settings(storage_backend="json", data_dir=str(tmp_path))
    engine = build_engine(settings)
    moderator_utils.register_admin(engine, UserProfile(user_id="admin1"))
    report = report_utils.create_report(engine, ReportCreate(
        reporter_id="u1", reported_store_id="s1", type="copyright", reason="Store sells counterfeit goods",
    ))
    report_utils.resolve_report(engine, report.id, "Store suspended pending review", "admin1")

    reloaded = build_engine(settings)
    stored = report_utils.get_report(reloaded, report.id)
    assert stored.status.value == "resolved"
    assert stored.resolution == "Store suspended pending review"

    with open(tmp_path / "reports.json") as f:
        assert json.load(f)[0]["id"] == report.id


def test_partial_backend_cannot_be_created():
    class ReadOnlyStore(RecordStore):
        def all(self):
            return []

        def get(self, record_id):
            return None

    with pytest.raises(TypeError):
        ReadOnlyStore()
