"""Route table and the auto-loading controller namespace."""

from __future__ import annotations

import importlib.util
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from appboot.core.errors import ConfigError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Route:
    path: str
    controller: str
    action: str = "index"

    def match(self, path: str) -> dict[str, str] | None:
        want = [s for s in self.path.split("/") if s]
        got = [s for s in path.split("/") if s]
        if len(want) != len(got):
            return None
        params: dict[str, str] = {}
        for w, g in zip(want, got):
            if w.startswith(":"):
                params[w[1:]] = g
            elif w != g:
                return None
        return params


class RouteSet:
    def __init__(self) -> None:
        self.routes: list[Route] = []

    def draw(self, path: str, controller: str, action: str = "index") -> Route:
        route = Route(path=path, controller=controller, action=action)
        self.routes.append(route)
        return route

    def clear(self) -> None:
        self.routes = []

    def reload(self, routes_file: str | Path) -> None:
        """Rebuild the table from a YAML list of {path, controller, action}."""

        routes_path = Path(routes_file)
        self.clear()
        if not routes_path.exists():
            logger.debug("routes_file_missing", extra={"routes_file": str(routes_path)})
            return

        try:
            raw = yaml.safe_load(routes_path.read_text(encoding="utf-8")) or []
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse failed: {e}", path=str(routes_path)) from e
        if not isinstance(raw, list):
            raise ConfigError("must be a YAML list of routes", path=str(routes_path))

        for i, entry in enumerate(raw):
            if not isinstance(entry, Mapping) or "path" not in entry or "controller" not in entry:
                raise ConfigError("route needs 'path' and 'controller'", path=f"{routes_path}[{i}]")
            self.draw(str(entry["path"]), str(entry["controller"]), str(entry.get("action", "index")))

    def recognize(self, path: str) -> tuple[Route, dict[str, str]] | None:
        for route in self.routes:
            params = route.match(path)
            if params is not None:
                return route, params
        return None

    def __len__(self) -> int:
        return len(self.routes)


def underscore(name: str) -> str:
    """`FooBarController` -> `foo_bar_controller`."""

    s = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s).lower()


class ControllerNamespace:
    """Resolves controller classes lazily from files under the given roots.

    `ns.FooBar` looks for `foo_bar.py`, then `foo_bar_controller.py`, in the
    first root that has one and returns the class named `FooBar` (or
    `FooBarController`).
    """

    def __init__(self, *roots: str | Path) -> None:
        self._roots = [Path(r) for r in roots]
        self._cache: dict[str, Any] = {}

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._cache:
            self._cache[name] = self._load(name)
        return self._cache[name]

    def _candidates(self, name: str) -> Iterable[tuple[Path, str]]:
        base = underscore(name)
        for root in self._roots:
            yield root / f"{base}.py", name
            if not base.endswith("_controller"):
                yield root / f"{base}_controller.py", f"{name}Controller"

    def _load(self, name: str) -> Any:
        for path, attr in self._candidates(name):
            if not path.is_file():
                continue
            spec = importlib.util.spec_from_file_location(f"appboot_controllers.{path.stem}", path)
            if spec is None or spec.loader is None:
                continue
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
            found = getattr(module, attr, None)
            if found is None:
                found = getattr(module, name, None)
            if found is not None:
                return found
        raise AttributeError(f"no controller {name!r} under {', '.join(str(r) for r in self._roots)}")
