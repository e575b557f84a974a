from __future__ import annotations

import logging
import runpy
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from appboot.core.capabilities import Capability
from appboot.core.errors import FatalLoadError
from appboot.frameworks import FRAMEWORKS, FrameworkEntry

if TYPE_CHECKING:
    from appboot.runtime.registry import GlobalRegistry


logger = logging.getLogger(__name__)


class ModuleLoader:
    """Loads framework capabilities and application setup files.

    Setup files are resolved as `<root>/config/<identifier>.py` and run once
    per loader, like a `require`.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        frameworks: Mapping[Capability, FrameworkEntry] | None = None,
    ) -> None:
        self.root = Path(root)
        self._frameworks = dict(FRAMEWORKS if frameworks is None else frameworks)
        self._required: dict[str, dict[str, Any]] = {}

    def resolve(self, identifier: str) -> Path:
        return self.root / "config" / f"{identifier}.py"

    def require_framework(self, capability: Capability, registry: "GlobalRegistry") -> None:
        name = capability.value
        if capability in registry.loaded:
            return

        entry = self._frameworks.get(capability)
        if entry is None:
            raise FatalLoadError("no framework registered for capability", identifier=name)

        missing = [req.value for req in entry.requires if req not in registry.loaded]
        if missing:
            raise FatalLoadError(f"requires {', '.join(missing)} to be loaded first", identifier=name)

        try:
            entry.load(registry)
        except FatalLoadError:
            raise
        except Exception as e:  # noqa: BLE001
            raise FatalLoadError(f"load failed: {e}", identifier=name) from e

        registry.loaded.append(capability)

    def require(self, identifier: str, **init_globals: Any) -> dict[str, Any]:
        """Run the setup file for `identifier` and return its globals."""

        if identifier in self._required:
            return self._required[identifier]

        path = self.resolve(identifier)
        if not path.is_file():
            raise FatalLoadError(f"no such file {path}", identifier=identifier)

        try:
            namespace = runpy.run_path(str(path), init_globals=init_globals, run_name=f"appboot.{identifier}")
        except Exception as e:  # noqa: BLE001
            raise FatalLoadError(f"load failed: {e}", identifier=identifier) from e

        logger.debug("file_required", extra={"identifier": identifier, "file": str(path)})
        self._required[identifier] = namespace
        return namespace
