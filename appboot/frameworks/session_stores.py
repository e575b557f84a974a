"""Built-in session stores.

A store is constructed per session as `Store(session_id, options)` and
exposes `restore()`, `update(data)`, `close()` and `delete()`.
"""

from __future__ import annotations

import json
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping


class MemoryStore:
    _sessions: dict[str, dict[str, Any]] = {}
    _lock = threading.Lock()

    def __init__(self, session_id: str, options: Mapping[str, Any] | None = None) -> None:
        self.session_id = session_id
        self.options = dict(options or {})
        self._data: dict[str, Any] = {}

    def restore(self) -> dict[str, Any]:
        with self._lock:
            self._data = dict(self._sessions.get(self.session_id, {}))
        return self._data

    def update(self, data: Mapping[str, Any] | None = None) -> None:
        if data is not None:
            self._data = dict(data)
        with self._lock:
            self._sessions[self.session_id] = dict(self._data)

    def close(self) -> None:
        self.update()

    def delete(self) -> None:
        with self._lock:
            self._sessions.pop(self.session_id, None)
        self._data = {}


class FileStore:
    """One JSON file per session under `options["tmpdir"]`."""

    def __init__(self, session_id: str, options: Mapping[str, Any] | None = None) -> None:
        self.session_id = session_id
        self.options = dict(options or {})
        tmpdir = Path(self.options.get("tmpdir") or tempfile.gettempdir())
        prefix = str(self.options.get("prefix", ""))
        self.path = tmpdir / f"{prefix}{session_id}.json"
        self._data: dict[str, Any] = {}

    def restore(self) -> dict[str, Any]:
        if self.path.exists():
            self._data = json.loads(self.path.read_text(encoding="utf-8"))
        return self._data

    def update(self, data: Mapping[str, Any] | None = None) -> None:
        if data is not None:
            self._data = dict(data)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")

    def close(self) -> None:
        self.update()

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
        self._data = {}


class ActiveRecordStore:
    """Sessions kept in a `sessions` table of `options["connection"]` (DB-API)."""

    _CREATE = "CREATE TABLE IF NOT EXISTS sessions (session_id TEXT PRIMARY KEY, data TEXT NOT NULL)"

    def __init__(self, session_id: str, options: Mapping[str, Any] | None = None) -> None:
        self.session_id = session_id
        self.options = dict(options or {})
        self.connection = self.options.get("connection")
        if self.connection is None:
            raise ValueError("ActiveRecordStore needs options['connection']")
        self.connection.execute(self._CREATE)
        self._data: dict[str, Any] = {}

    def restore(self) -> dict[str, Any]:
        row = self.connection.execute(
            "SELECT data FROM sessions WHERE session_id = ?", (self.session_id,)
        ).fetchone()
        self._data = json.loads(row[0]) if row else {}
        return self._data

    def update(self, data: Mapping[str, Any] | None = None) -> None:
        if data is not None:
            self._data = dict(data)
        self.connection.execute(
            "INSERT OR REPLACE INTO sessions (session_id, data) VALUES (?, ?)",
            (self.session_id, json.dumps(self._data, ensure_ascii=False)),
        )
        self.connection.commit()

    def close(self) -> None:
        self.update()

    def delete(self) -> None:
        self.connection.execute("DELETE FROM sessions WHERE session_id = ?", (self.session_id,))
        self.connection.commit()
        self._data = {}


SESSION_STORES: dict[str, type] = {
    "MemoryStore": MemoryStore,
    "FileStore": FileStore,
    "ActiveRecordStore": ActiveRecordStore,
}
