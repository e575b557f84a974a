"""Subsystems brought up by the bootstrap, and the static table used to load them.

Each capability maps to a `FrameworkEntry` whose prerequisites must already
be loaded, in declared order, before its own load callback runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from appboot.core.capabilities import Capability

from .base import Framework, Mailer, Support, WebService
from .dispatcher import Dispatcher
from .persistence import ConnectionSpecError, Persistence

if TYPE_CHECKING:
    from appboot.runtime.registry import GlobalRegistry


logger = logging.getLogger(__name__)


def _installer(capability: Capability, factory: type[Framework]) -> Callable[["GlobalRegistry"], None]:
    def load(registry: "GlobalRegistry") -> None:
        # A subsystem the host placed in the registry beforehand is kept.
        if registry.framework(capability) is None:
            setattr(registry, capability.value, factory())
        logger.debug("framework_loaded", extra={"framework": capability.value})

    return load


@dataclass(frozen=True, slots=True)
class FrameworkEntry:
    capability: Capability
    requires: tuple[Capability, ...]
    load: Callable[["GlobalRegistry"], None]


_SUBSYSTEMS: dict[Capability, tuple[type[Framework], tuple[Capability, ...]]] = {
    Capability.SUPPORT: (Support, ()),
    Capability.PERSISTENCE: (Persistence, (Capability.SUPPORT,)),
    Capability.DISPATCHER: (Dispatcher, (Capability.SUPPORT,)),
    Capability.MAILER: (Mailer, (Capability.DISPATCHER,)),
    Capability.WEB_SERVICE: (WebService, (Capability.DISPATCHER, Capability.PERSISTENCE)),
}

FRAMEWORKS: dict[Capability, FrameworkEntry] = {
    cap: FrameworkEntry(cap, requires, _installer(cap, cls)) for cap, (cls, requires) in _SUBSYSTEMS.items()
}

__all__ = [
    "FRAMEWORKS",
    "ConnectionSpecError",
    "Dispatcher",
    "Framework",
    "FrameworkEntry",
    "Mailer",
    "Persistence",
    "Support",
    "WebService",
]
