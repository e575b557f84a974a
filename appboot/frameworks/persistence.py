from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

from appboot.core.errors import ConfigError

from .base import Framework


class ConnectionSpecError(ConfigError):
    """The database configuration does not describe a usable connection."""


def _connect_sqlite3(spec: Mapping[str, Any], *, root: Path | None) -> sqlite3.Connection:
    database = spec.get("database")
    if not isinstance(database, str) or not database:
        raise ConnectionSpecError("sqlite3 needs a non-empty 'database'", path="database")
    if database != ":memory:" and root is not None and not Path(database).is_absolute():
        database = str(root / database)
    timeout = float(spec.get("timeout", 5000)) / 1000.0
    return sqlite3.connect(database, timeout=timeout)


ADAPTERS: dict[str, Callable[..., Any]] = {
    "sqlite3": _connect_sqlite3,
}


@dataclass
class Persistence(Framework):
    configurations: dict[str, Any] = field(default_factory=dict)
    connection: Any = None
    connection_spec: dict[str, Any] | None = None

    def establish_connection(self, environment: str, *, root: Path | None = None) -> Any:
        """Open a connection using `configurations[environment]`."""

        spec = self.configurations.get(environment)
        if spec is None:
            raise ConnectionSpecError(f"no database configuration for environment {environment!r}")
        if not isinstance(spec, Mapping):
            raise ConnectionSpecError("must be a mapping", path=environment)

        adapter = spec.get("adapter")
        if not adapter:
            raise ConnectionSpecError("database configuration does not specify an adapter", path=environment)
        connect = ADAPTERS.get(str(adapter))
        if connect is None:
            raise ConnectionSpecError(f"unsupported adapter {adapter!r}", path=f"{environment}.adapter")

        self.remove_connection()
        self.connection = connect(spec, root=root)
        self.connection_spec = dict(spec)
        return self.connection

    def remove_connection(self) -> None:
        if self.connection is not None:
            self.connection.close()
        self.connection = None
        self.connection_spec = None
