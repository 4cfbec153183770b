"""File-based JSON storage for incidents, notifications, messages and applications.

Each collection is a JSON list stored under the base directory
(``~/.edutrust/`` by default), e.g. ``incidents.json``.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from edutrust.config import default_home

INCIDENTS = "incidents"
NOTIFICATIONS = "notifications"
MESSAGES = "messages"
APPLICATIONS = "applications"

COLLECTIONS = (INCIDENTS, NOTIFICATIONS, MESSAGES, APPLICATIONS)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        lock = _locks.get(path)
        if lock is None:
            lock = _locks[path] = threading.RLock()
        return lock


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    """File-based storage for record collections.

    Stores that point at the same directory share one re-entrant lock, held
    by callers that need a check-then-append sequence to be atomic.
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        self._base = Path(base_dir) if base_dir else default_home() / "records"
        self._base.mkdir(parents=True, exist_ok=True)
        self.lock = _lock_for(self._base.resolve())

    @property
    def base_dir(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return self._base / f"{collection}.json"

    def _read_json(self, path: Path) -> list[dict]:
        """Lenient read for lookups: an unreadable file reads as empty."""
        try:
            return self._load_json(path)
        except (ValueError, OSError):
            return []

    def _load_json(self, path: Path) -> list[dict]:
        """Strict read for the write path: damage raises instead of reading as empty."""
        if not path.exists():
            return []
        data = json.loads(path.read_text())
        if not isinstance(data, list):
            raise ValueError(f"Corrupt record file (expected a JSON list): {path}")
        return data

    def _write_json(self, path: Path, data: list[dict]) -> None:
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, default=str)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Append *record* to *collection* and return it."""
        path = self._path(collection)
        with self.lock:
            records = self._load_json(path)
            records.append(record)
            self._write_json(path, records)
        return record

    def update(self, collection: str, record_id: str, partial: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Merge *partial* into the record with *record_id*. Returns updated dict or None."""
        path = self._path(collection)
        with self.lock:
            records = self._load_json(path)
            for r in records:
                if r.get("id") == record_id:
                    r.update(partial)
                    self._write_json(path, records)
                    return r
        return None

    def get(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        """Look up a record by ID. Returns None if not found."""
        for r in self._read_json(self._path(collection)):
            if r.get("id") == record_id:
                return r
        return None

    def list(self, collection: str, **filters: Any) -> list[dict[str, Any]]:
        """Return all records in *collection* whose fields equal *filters*."""
        records = self._read_json(self._path(collection))
        for key, value in filters.items():
            if value is None:
                continue
            records = [r for r in records if r.get(key) == value]
        return records

    def count(self, collection: str) -> int:
        return len(self._read_json(self._path(collection)))
