"""Application configuration helpers."""

from __future__ import annotations

from .env import (
    optional_env_float,
    optional_env_int,
    optional_env_var,
    require_env_vars,
)
from .errors import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .imports import ImportConfig, get_import_config
from .logging import configure_logging
from .sp_api import SellingPartnerConfig, get_selling_partner_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SellingPartnerConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_import_config",
    "get_selling_partner_config",
    "get_storage_config",
    "optional_env_float",
    "optional_env_int",
    "optional_env_var",
    "require_env_vars",
]
