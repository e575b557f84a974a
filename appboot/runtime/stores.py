"""Normalization and lookup of configured session and fragment stores."""

from __future__ import annotations

import re
from typing import Any, Mapping

from appboot.core.errors import StoreLookupError
from appboot.frameworks.fragment_stores import FRAGMENT_STORES
from appboot.frameworks.session_stores import SESSION_STORES


def camelize(tag: str) -> str:
    """`active_record_store` -> `ActiveRecordStore`."""

    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[_\s]+", tag.strip()) if part)


def _is_tag(value: Any) -> bool:
    return isinstance(value, str)


def _lookup(kind: str, tag: str, table: Mapping[str, type]) -> type:
    name = camelize(tag)
    try:
        return table[name]
    except KeyError:
        raise StoreLookupError(kind, tag, known=sorted(table)) from None


def resolve_session_store(value: Any, *, table: Mapping[str, type] = SESSION_STORES) -> Any:
    """A tag resolves to the built-in store class; anything else is used as-is."""

    if _is_tag(value):
        return _lookup("session", value, table)
    return value


def normalize_fragment_store(value: Any) -> tuple[Any, ...]:
    """Bring a fragment store setting into `(tag_or_instance, *params)` form."""

    if isinstance(value, (list, tuple)):
        if not value:
            raise StoreLookupError("fragment", value, known=sorted(FRAGMENT_STORES))
        return tuple(value)
    return (value,)


def resolve_fragment_store(value: Any, *, table: Mapping[str, type] = FRAGMENT_STORES) -> Any:
    """Construct the configured fragment store, or return a ready-made instance."""

    head, *params = normalize_fragment_store(value)
    if not _is_tag(head):
        return head
    store = _lookup("fragment", head, table)
    return store(*params) if params else store()
