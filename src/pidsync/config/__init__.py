"""Application configuration helpers."""

from __future__ import annotations

from .datacite import DataCiteConfig, get_datacite_config
from .env import optional_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    MissingConfigurationError,
    RepairExecutorUnavailableError,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import LOG_LEVEL_ENV, configure_logging, resolve_log_level
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import DEFAULT_REPAIR_IDENTITY, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_REPAIR_IDENTITY",
    "LOG_LEVEL_ENV",
    "ConfigurationError",
    "DataCiteConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "RepairExecutorUnavailableError",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_config",
    "get_datacite_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
    "resolve_log_level",
]
