from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

from appboot.config.model import Configuration
from appboot.core.capabilities import DEFAULT_CAPABILITIES
from appboot.runtime.loader import ModuleLoader
from appboot.runtime.registry import GlobalRegistry, reset_registry


DATABASE_YML = """
test:
  adapter: sqlite3
  database: ":memory:"
production:
  adapter: sqlite3
  database: db/production.sqlite3
""".lstrip()


def close_handlers(logger: logging.Logger | None) -> None:
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(sys, "path", list(sys.path))
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("APP_ROOT", raising=False)
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    root = tmp_path / "app_root"
    (root / "config" / "environments").mkdir(parents=True)
    (root / "config" / "environments" / "test.py").write_text("", encoding="utf-8")
    (root / "config" / "database.yml").write_text(DATABASE_YML, encoding="utf-8")
    (root / "log").mkdir()
    (root / "app" / "controllers").mkdir(parents=True)
    (root / "app" / "views").mkdir()
    return root


@pytest.fixture
def config(app_root: Path) -> Configuration:
    return Configuration(root=app_root, environment="test")


@pytest.fixture
def registry() -> Iterator[GlobalRegistry]:
    reg = GlobalRegistry()
    yield reg
    if reg.persistence is not None:
        reg.persistence.remove_connection()
    if reg.default_logger.is_set:
        close_handlers(reg.default_logger.get())


@pytest.fixture
def loaded_registry(registry: GlobalRegistry, app_root: Path) -> GlobalRegistry:
    """A registry with every default framework loaded, for running single steps."""

    loader = ModuleLoader(app_root)
    for capability in DEFAULT_CAPABILITIES:
        loader.require_framework(capability, registry)
    return registry
