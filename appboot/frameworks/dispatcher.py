from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import Framework
from .routing import RouteSet
from .session_stores import FileStore


def default_session_options() -> dict[str, Any]:
    return {
        "database_manager": FileStore,
        "session_key": "_session_id",
        "session_path": "/",
        "prefix": "appboot_sess.",
    }


@dataclass
class Dispatcher(Framework):
    routes: RouteSet = field(default_factory=RouteSet)
    default_session_options: dict[str, Any] = field(default_factory=default_session_options)
    fragment_cache_store: Any = None

    @property
    def session_store(self) -> Any:
        return self.default_session_options.get("database_manager")
