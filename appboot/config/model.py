from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from appboot.core.capabilities import DEFAULT_CAPABILITIES, Capability, parse_capabilities

from .loader import load_database_configuration


_MODEL_DIR_PATTERN = re.compile(r"^[_a-z]")

# Searched after the per-environment mocks and the model/component subfolders.
STANDARD_LOAD_DIRS = (
    "app",
    "app/models",
    "app/controllers",
    "app/helpers",
    "app/apis",
    "components",
    "config",
    "lib",
    "vendor",
)


def default_root() -> Path:
    return Path(os.environ.get("APP_ROOT") or Path.cwd())


def default_environment() -> str:
    return os.environ.get("APP_ENV") or "development"


@dataclass
class Configuration:
    """All parameters of the bootstrap sequence.

    Defaults are computed once at construction from `root` and `environment`.
    Every field may be reassigned before `Initializer.process()` runs; nothing
    stops later mutation, but the bootstrap only reads the values once.
    """

    root: Path = field(default_factory=default_root)
    environment: str = field(default_factory=default_environment)

    frameworks: list[str | Capability] = field(default_factory=lambda: list(DEFAULT_CAPABILITIES))
    load_paths: list[Path] | None = None
    log_path: Path | None = None
    log_level: str | None = None
    view_path: Path | None = None
    controller_paths: list[Path] | None = None
    session_options: dict[str, Any] = field(default_factory=dict)
    session_store: Any = None
    fragment_store: Any = None
    database_configuration_file: Path | None = None
    routes_file: Path | None = None

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        if self.load_paths is None:
            self.load_paths = self._default_load_paths()
        if self.log_path is None:
            self.log_path = self.root / "log" / f"{self.environment}.log"
        if self.log_level is None:
            self.log_level = "info" if self.environment == "production" else "debug"
        if self.view_path is None:
            self.view_path = self.root / "app" / "views"
        if self.controller_paths is None:
            self.controller_paths = [self.root / "app" / "controllers", self.root / "components"]
        if self.database_configuration_file is None:
            self.database_configuration_file = self.root / "config" / "database.yml"
        if self.routes_file is None:
            self.routes_file = self.root / "config" / "routes.yml"

    def _default_load_paths(self) -> list[Path]:
        paths = [self.root / "test" / "mocks" / self.environment]

        # Then model and component subdirectories.
        for parent in (self.root / "app" / "models", self.root / "components"):
            if parent.is_dir():
                paths.extend(sorted(p for p in parent.iterdir() if _MODEL_DIR_PATTERN.match(p.name)))

        # Followed by the standard includes.
        paths.extend(d for d in (self.root / rel for rel in STANDARD_LOAD_DIRS) if d.is_dir())
        return paths

    def capabilities(self) -> list[Capability]:
        return parse_capabilities(self.frameworks)

    def includes(self, capability: Capability) -> bool:
        return capability in self.capabilities()

    def environment_file(self) -> str:
        return f"environments/{self.environment}"

    def database_configuration(self) -> dict[str, Any]:
        """Parsed database configuration, keyed by environment name.

        Raises:
            ConfigurationAccessError: see `load_database_configuration`.
        """

        return load_database_configuration(self.database_configuration_file, root=self.root)
