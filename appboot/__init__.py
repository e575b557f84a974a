"""Application bootstrap orchestrator.

Typical use::

    from appboot import Initializer

    Initializer.run(configure=lambda config: config.frameworks.remove("web_service"))
"""

from __future__ import annotations

from appboot.config.model import Configuration
from appboot.core import __version__
from appboot.runtime.initializer import Initializer
from appboot.runtime.registry import get_registry, reset_registry

__all__ = [
    "Configuration",
    "Initializer",
    "__version__",
    "get_registry",
    "reset_registry",
]
