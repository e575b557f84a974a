from __future__ import annotations

from .logging import build_default_logger, configure_logging, resolve_level

__all__ = ["build_default_logger", "configure_logging", "resolve_level"]
