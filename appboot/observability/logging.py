"""Logging setup.

Two concerns live here:
- `configure_logging` wires the root logger for hosts that want the
  bootstrap's own diagnostics on stdout.
- `build_default_logger` produces the process-wide default logger handed to
  the subsystems, degrading to stderr at WARNING when the log file cannot be
  opened.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from appboot.core.errors import LoggingSetupError


DEFAULT_LOGGER_NAME = "appboot.default"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


class _KVFormatter(logging.Formatter):
    """Appends `extra={...}` fields as key=value pairs."""

    _RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        line = super().format(record)
        extras = [
            f"{k}={v}" for k, v in record.__dict__.items() if k not in self._RESERVED and not k.startswith("_")
        ]
        return f"{line} {' '.join(extras)}" if extras else line


def configure_logging(*, level: str = "INFO") -> None:
    """Configure root logging once.

    Safe to call multiple times.
    """

    root = logging.getLogger()
    if getattr(root, "_appboot_configured", False):
        root.setLevel(level)
        return

    root.setLevel(level)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_KVFormatter(fmt=_LOG_FORMAT))

    root.addHandler(handler)
    setattr(root, "_appboot_configured", True)


def resolve_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    try:
        return _LEVELS[str(name).strip().lower()]
    except KeyError:
        raise LoggingSetupError(f"unknown log level {name!r}") from None


def _fresh_logger() -> logging.Logger:
    # Unregistered instance: one per call, outside the getLogger() hierarchy.
    logger = logging.Logger(DEFAULT_LOGGER_NAME)
    logger.propagate = False
    return logger


def _open_file_logger(log_path: Path, level: str | int) -> logging.Logger:
    try:
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise LoggingSetupError(f"cannot open {log_path}: {e}") from e

    try:
        resolved = resolve_level(level)
    except LoggingSetupError:
        handler.close()
        raise

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger = _fresh_logger()
    logger.addHandler(handler)
    logger.setLevel(resolved)
    return logger


def build_default_logger(log_path: str | Path, level: str | int) -> logging.Logger:
    """Return a file-backed logger at `level`, or a stderr logger at WARNING.

    The fallback emits exactly one warning naming `log_path`. Every call
    returns a new logger; previously returned loggers are left untouched.
    """

    log_path = Path(log_path)
    try:
        return _open_file_logger(log_path, level)
    except LoggingSetupError:
        logger = _fresh_logger()
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        logger.warning(
            "Unable to access log file. Please ensure that %s exists and is chmod 0666. "
            "The log level has been raised to WARNING and the output directed to STDERR "
            "until the problem is fixed.",
            log_path,
        )
        return logger
