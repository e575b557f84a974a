"""The bootstrap step sequence.

`Initializer.process()` runs, strictly in order:

 1. set_load_path
 2. require_frameworks
 3. require_environment
 4. initialize_database            (persistence)
 5. initialize_logger
 6. initialize_framework_logging
 7. initialize_framework_views
 8. initialize_routing             (dispatcher)
 9. initialize_session_settings    (dispatcher)
10. initialize_session_store       (dispatcher; no-op without session_store)
11. initialize_fragment_store      (dispatcher; no-op without fragment_store)

Only the logger step recovers from failure. Any other exception stops the
sequence and leaves already-applied state in place.

Running `process()` twice against the same registry is unsupported and
raises AlreadyInitializedError.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable

from appboot.config.model import Configuration
from appboot.core.capabilities import Capability
from appboot.core.errors import AlreadyInitializedError
from appboot.frameworks.routing import ControllerNamespace
from appboot.observability.logging import build_default_logger

from .loader import ModuleLoader
from .registry import GlobalRegistry, get_registry
from .stores import resolve_fragment_store, resolve_session_store


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Step:
    name: str
    run: Callable[[], None]


class Initializer:
    """Processes a Configuration into the process-wide registry.

    Run it with the defaults::

        Initializer.run()

    or adjust the configuration first::

        Initializer.run(configure=lambda c: setattr(c, "session_store", "memory_store"))
    """

    def __init__(
        self,
        configuration: Configuration,
        *,
        registry: GlobalRegistry | None = None,
        loader: ModuleLoader | None = None,
    ) -> None:
        self.configuration = configuration
        self.registry = registry if registry is not None else get_registry()
        self.loader = loader if loader is not None else ModuleLoader(configuration.root)

    @classmethod
    def run(
        cls,
        command: str = "process",
        configuration: Configuration | None = None,
        configure: Callable[[Configuration], Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        configuration = configuration if configuration is not None else Configuration()
        if configure is not None:
            configure(configuration)
        return getattr(cls(configuration, **kwargs), command)()

    def plan(self) -> list[Step]:
        """The steps `process()` will run, with every capability gate already applied.

        Store settings are read by their steps instead, after the environment
        file has had its chance to change them.
        """

        caps = self.configuration.capabilities()
        dispatcher = Capability.DISPATCHER in caps

        gated: list[tuple[bool, Callable[[], None]]] = [
            (True, self.set_load_path),
            (True, self.require_frameworks),
            (True, self.require_environment),
            (Capability.PERSISTENCE in caps, self.initialize_database),
            (True, self.initialize_logger),
            (True, self.initialize_framework_logging),
            (True, self.initialize_framework_views),
            (dispatcher, self.initialize_routing),
            (dispatcher, self.initialize_session_settings),
            (dispatcher, self.initialize_session_store),
            (dispatcher, self.initialize_fragment_store),
        ]

        steps: list[Step] = []
        for enabled, fn in gated:
            if enabled:
                steps.append(Step(name=fn.__name__, run=fn))
            else:
                logger.debug("step_skipped", extra={"step": fn.__name__})
        return steps

    def process(self) -> GlobalRegistry:
        if self.registry.booted:
            raise AlreadyInitializedError("bootstrap already ran for this registry; call reset_registry() first")

        steps = self.plan()
        self.registry.booted = True
        logger.info(
            "bootstrap_started",
            extra={"environment": self.configuration.environment, "steps": len(steps)},
        )

        for step in steps:
            logger.debug("step_started", extra={"step": step.name})
            step.run()

        logger.info("bootstrap_finished", extra={"environment": self.configuration.environment})
        return self.registry

    def set_load_path(self) -> None:
        # Prepending in reverse leaves the paths at the head in declared order.
        for path in reversed(self.configuration.load_paths):
            if os.path.isdir(path):
                sys.path.insert(0, str(path))
        sys.path[:] = list(dict.fromkeys(sys.path))

    def require_frameworks(self) -> None:
        for capability in self.configuration.capabilities():
            self.loader.require_framework(capability, self.registry)

    def require_environment(self) -> None:
        self.loader.require(
            self.configuration.environment_file(),
            configuration=self.configuration,
            registry=self.registry,
        )

    def initialize_database(self) -> None:
        persistence = self.registry.persistence
        persistence.configurations = self.configuration.database_configuration()
        persistence.establish_connection(self.configuration.environment, root=self.configuration.root)

    def initialize_logger(self) -> None:
        # A logger installed by the host (e.g. from the environment file) wins.
        if self.registry.default_logger.is_set:
            logger.debug("default_logger_preset")
            return

        default = build_default_logger(self.configuration.log_path, self.configuration.log_level)
        self.registry.default_logger.set(default)

    def initialize_framework_logging(self) -> None:
        default = self.registry.default_logger.get()
        for framework in (self.registry.persistence, self.registry.dispatcher, self.registry.mailer):
            if framework is not None and framework.logger is None:
                framework.logger = default

    def initialize_framework_views(self) -> None:
        for framework in (self.registry.dispatcher, self.registry.mailer):
            if framework is not None and framework.view_root is None:
                framework.view_root = self.configuration.view_path

    def initialize_routing(self) -> None:
        self.registry.dispatcher.routes.reload(self.configuration.routes_file)
        self.registry.controllers = ControllerNamespace(*self.configuration.controller_paths)

    def initialize_session_settings(self) -> None:
        self.registry.dispatcher.default_session_options.update(self.configuration.session_options)

    def initialize_session_store(self) -> None:
        if self.configuration.session_store is None:
            logger.debug("session_store_unset")
            return
        store = resolve_session_store(self.configuration.session_store)
        self.registry.dispatcher.default_session_options["database_manager"] = store

    def initialize_fragment_store(self) -> None:
        if self.configuration.fragment_store is None:
            logger.debug("fragment_store_unset")
            return
        self.registry.dispatcher.fragment_cache_store = resolve_fragment_store(self.configuration.fragment_store)
