"""
Keyed record stores backing the engine's collections.

Records are plain JSON-compatible dicts. Every read hands out a copy, so a
caller holding a record never sees a later mutation half-applied.
"""

import os, json, copy, tempfile, shutil, threading, logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

logger = logging.getLogger("moderation_backend.storage")


class RecordStore(ABC):
    """
    Minimal create/find/update interface over records keyed by one field.

    Backends hold `self._lock` for every call, so a reader running next to a
    writer sees the collection either before or after a put, never during.
    """

    def __init__(self, key: str = "id"):
        self.key = key
        self._lock = threading.RLock()

    @abstractmethod
    def all(self) -> List[dict]: ...

    @abstractmethod
    def get(self, record_id: str) -> Optional[dict]: ...

    @abstractmethod
    def put(self, record: dict) -> dict: ...

    @abstractmethod
    def delete(self, record_id: str) -> bool: ...

    def __contains__(self, record_id: str) -> bool:
        return self.get(record_id) is not None

    def __len__(self) -> int:
        return len(self.all())


class InMemoryRecordStore(RecordStore):
    def __init__(self, key: str = "id"):
        super().__init__(key)
        self._records: Dict[str, dict] = {}

    def all(self) -> List[dict]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._records.values()]

    def get(self, record_id: str) -> Optional[dict]:
        with self._lock:
            record = self._records.get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def put(self, record: dict) -> dict:
        with self._lock:
            self._records[record[self.key]] = copy.deepcopy(record)
        return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class JsonRecordStore(RecordStore):
    """One JSON list per collection, rewritten atomically on every put."""

    def __init__(self, path: str, key: str = "id"):
        super().__init__(key)
        self.path = path

    def _load(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read().strip()
                if not content:
                    return []
                return json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Corrupted record file %s, starting empty", self.path)
            return []

    def _save(self, records: List[dict]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(self.path) or ".")
        os.close(tmp_fd)
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def all(self) -> List[dict]:
        with self._lock:
            return self._load()

    def get(self, record_id: str) -> Optional[dict]:
        with self._lock:
            for record in self._load():
                if record[self.key] == record_id:
                    return record
        return None

    def put(self, record: dict) -> dict:
        with self._lock:
            records = self._load()
            for i, stored in enumerate(records):
                if stored[self.key] == record[self.key]:
                    records[i] = record
                    break
            else:
                records.append(record)
            self._save(records)
        return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            records = self._load()
            updated = [r for r in records if r[self.key] != record_id]
            if len(updated) == len(records):
                return False
            self._save(updated)
        return True
