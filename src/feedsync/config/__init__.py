"""Application configuration helpers."""

from __future__ import annotations

from .env import positive_int_env
from .errors import ConfigurationError
from .logging import configure_logging
from .reprocessing import ReprocessingConfig, get_reprocessing_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ReprocessingConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_reprocessing_config",
    "get_storage_config",
    "positive_int_env",
]
