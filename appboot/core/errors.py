from __future__ import annotations


class AppBootError(Exception):
    """Base exception for this project."""


class ConfigError(AppBootError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class ConfigurationAccessError(ConfigError):
    """The database configuration file is missing, unreadable or unparseable."""


class FatalLoadError(AppBootError):
    """A framework or environment file failed to load. Aborts the bootstrap."""

    def __init__(self, message: str, *, identifier: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier


class LoggingSetupError(AppBootError):
    """The log file could not be opened. Recovered by the logger factory."""


class StoreLookupError(AppBootError, LookupError):
    """Unknown session or fragment store tag."""

    def __init__(self, kind: str, tag: object, *, known: list[str]):
        super().__init__(f"unknown {kind} store {tag!r} (known: {', '.join(known) or '-'})")
        self.kind = kind
        self.tag = tag


class AlreadyInitializedError(AppBootError):
    """process() was invoked again on a registry that already booted."""
