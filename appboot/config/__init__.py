"""Bootstrap configuration.

- `Configuration` computes conventional defaults from the application root
  and environment.
- The database configuration is a YAML template with strict ${ENV_VAR}
  expansion.
"""

from __future__ import annotations

from appboot.config.loader import expand_env, load_database_configuration
from appboot.config.model import Configuration
from appboot.core.errors import ConfigError, ConfigurationAccessError

__all__ = [
    "ConfigError",
    "Configuration",
    "ConfigurationAccessError",
    "expand_env",
    "load_database_configuration",
]
