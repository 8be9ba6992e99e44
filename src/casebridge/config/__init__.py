"""Application configuration helpers."""

from __future__ import annotations

from .env import env_list, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .gateway import GatewayConfig, get_gateway_config
from .logging import configure_logging
from .storage import DatabaseConfig, data_dir, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "GatewayConfig",
    "MissingConfigurationError",
    "configure_logging",
    "data_dir",
    "env_list",
    "get_database_config",
    "get_gateway_config",
    "require_env_var",
    "require_env_vars",
]
