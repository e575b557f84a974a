"""Built-in fragment cache stores."""

from __future__ import annotations

import hashlib
import re
import threading
from collections import OrderedDict
from pathlib import Path


class MemoryStore:
    """In-process cache; evicts the oldest entry beyond `max_entries`."""

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and int(max_entries) < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = int(max_entries) if max_entries is not None else None
        self._data: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def read(self, name: str) -> str | None:
        with self._lock:
            return self._data.get(name)

    def write(self, name: str, value: str) -> None:
        with self._lock:
            self._data[name] = value
            self._data.move_to_end(name)
            if self.max_entries is not None:
                while len(self._data) > self.max_entries:
                    self._data.popitem(last=False)

    def delete(self, name: str) -> None:
        with self._lock:
            self._data.pop(name, None)

    def delete_matched(self, pattern: str) -> int:
        rx = re.compile(pattern)
        with self._lock:
            doomed = [k for k in self._data if rx.search(k)]
            for k in doomed:
                del self._data[k]
        return len(doomed)

    def __len__(self) -> int:
        return len(self._data)


class FileStore:
    """One file per fragment under `cache_path`; names are hashed into file names."""

    def __init__(self, cache_path: str | Path) -> None:
        self.cache_path = Path(cache_path)
        self._names: dict[str, Path] = {}

    def _path(self, name: str) -> Path:
        digest = hashlib.sha1(name.encode("utf-8")).hexdigest()
        return self.cache_path / f"{digest}.cache"

    def read(self, name: str) -> str | None:
        path = self._path(name)
        return path.read_text(encoding="utf-8") if path.exists() else None

    def write(self, name: str, value: str) -> None:
        self.cache_path.mkdir(parents=True, exist_ok=True)
        path = self._path(name)
        path.write_text(value, encoding="utf-8")
        self._names[name] = path

    def delete(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)
        self._names.pop(name, None)

    def delete_matched(self, pattern: str) -> int:
        # Only names written through this instance are known.
        rx = re.compile(pattern)
        doomed = [n for n in self._names if rx.search(n)]
        for n in doomed:
            self.delete(n)
        return len(doomed)


FRAGMENT_STORES: dict[str, type] = {
    "MemoryStore": MemoryStore,
    "FileStore": FileStore,
}
