"""Database configuration loader (template expansion + YAML).

The file is treated as a text template first and parsed second:
- `${ENV_VAR}` placeholders anywhere in the text are replaced from the
  process environment.
- Expansion is strict: missing or empty env values raise
  ConfigurationAccessError.
- The expanded text must parse to a YAML mapping keyed by environment name.

Values from a `.env` file in the application root fill in variables the
process environment does not set; os.environ itself is never modified.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import dotenv_values

from appboot.core.errors import ConfigurationAccessError


_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _lookup_environ(root: Path | None) -> dict[str, str]:
    """Process environment layered over the root `.env`, without touching os.environ."""

    values: dict[str, str] = {}
    if root is not None:
        env_path = root / ".env"
        if env_path.exists():
            values.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    # Already-set environment variables win over .env.
    values.update(os.environ)
    return values


def expand_env(text: str, *, source: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace `${VAR}` placeholders, failing on the first unresolved one."""

    lookup = os.environ if environ is None else environ

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = lookup.get(var)
        if resolved is None or resolved == "":
            line = text.count("\n", 0, match.start()) + 1
            raise ConfigurationAccessError(
                f"missing or empty environment variable {var!r} (line {line})",
                path=source,
            )
        return resolved

    return _ENV_PATTERN.sub(_replace, text)


def load_database_configuration(path: str | Path, *, root: str | Path | None = None) -> dict[str, Any]:
    """Read, expand and parse a database configuration file.

    Args:
        path: The YAML template to read.
        root: Optional application root whose `.env` supplies fallback values.

    Raises:
        ConfigurationAccessError: The file is missing or unreadable, a
            placeholder is unresolved, or the YAML is invalid or not a mapping.
    """

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationAccessError("configuration file does not exist", path=str(config_path)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationAccessError(f"cannot read configuration file: {e}", path=str(config_path)) from e

    environ = _lookup_environ(Path(root) if root is not None else None)
    expanded = expand_env(text, source=str(config_path), environ=environ)

    try:
        document = yaml.safe_load(expanded)
    except yaml.YAMLError as e:
        raise ConfigurationAccessError(f"YAML parse failed: {e}", path=str(config_path)) from e

    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise ConfigurationAccessError("top level must be a YAML mapping (dict)", path=str(config_path))

    return dict(document)
