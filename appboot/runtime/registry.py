"""Process-wide state written by the bootstrap sequence.

Two write disciplines apply:
- `default_logger` is an init-once cell: the first writer wins.
- Everything else is reassigned whenever the owning step runs.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from appboot.core.capabilities import Capability
from appboot.frameworks import Dispatcher, Framework, Mailer, Persistence, Support, WebService


T = TypeVar("T")

_UNSET = object()


class InitOnceCell(Generic[T]):
    """A slot that accepts exactly one value."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: Any = _UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T | None:
        return None if self._value is _UNSET else self._value

    def set(self, value: T) -> bool:
        """Store `value` unless a value is already present. Returns whether it was stored."""

        if self._value is not _UNSET:
            return False
        self._value = value
        return True


@dataclass
class GlobalRegistry:
    default_logger: InitOnceCell[logging.Logger] = field(default_factory=InitOnceCell)

    # Subsystems exist only once their capability has been loaded.
    support: Support | None = None
    persistence: Persistence | None = None
    dispatcher: Dispatcher | None = None
    mailer: Mailer | None = None
    web_service: WebService | None = None

    # Auto-loading controller namespace bound by the routing step.
    controllers: Any = None

    loaded: list[Capability] = field(default_factory=list)
    booted: bool = False

    def framework(self, capability: Capability) -> Framework | None:
        return getattr(self, capability.value)


_registry: GlobalRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> GlobalRegistry:
    """Return the process-wide registry, creating it on first use."""

    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = GlobalRegistry()
        return _registry


def reset_registry() -> None:
    """Discard the process-wide registry (tests and embedding hosts)."""

    global _registry
    with _registry_lock:
        _registry = None
