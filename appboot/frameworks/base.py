from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Framework:
    """State shared by every bootstrapped subsystem."""

    logger: logging.Logger | None = None
    view_root: Path | None = None


@dataclass
class Support(Framework):
    pass


@dataclass
class Mailer(Framework):
    pass


@dataclass
class WebService(Framework):
    pass
