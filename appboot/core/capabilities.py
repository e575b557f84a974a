from __future__ import annotations

from enum import Enum
from typing import Iterable

from .errors import ConfigError


class Capability(str, Enum):
    """Closed vocabulary of optional subsystems."""

    SUPPORT = "support"
    PERSISTENCE = "persistence"
    DISPATCHER = "dispatcher"
    MAILER = "mailer"
    WEB_SERVICE = "web_service"


DEFAULT_CAPABILITIES: tuple[Capability, ...] = (
    Capability.SUPPORT,
    Capability.PERSISTENCE,
    Capability.DISPATCHER,
    Capability.MAILER,
    Capability.WEB_SERVICE,
)


def parse_capability(tag: str | Capability) -> Capability:
    if isinstance(tag, Capability):
        return tag
    try:
        return Capability(str(tag).strip().lower())
    except ValueError:
        known = ", ".join(c.value for c in Capability)
        raise ConfigError(f"unknown capability {tag!r} (known: {known})", path="frameworks") from None


def parse_capabilities(tags: Iterable[str | Capability]) -> list[Capability]:
    """Normalize tags to capabilities, keeping declared order and dropping repeats."""

    out: list[Capability] = []
    for tag in tags:
        cap = parse_capability(tag)
        if cap not in out:
            out.append(cap)
    return out
