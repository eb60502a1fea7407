"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .source import SourceConfig, get_source_config
from .storage import StorageConfig, get_database_uri, get_storage_config
from .sync import (
    DEFAULT_BASE_URL,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DATASETS,
    DEFAULT_PATCH_PATHS,
    NameMatchingConfig,
    SyncConfig,
    get_sync_config,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_DATASETS",
    "DEFAULT_PATCH_PATHS",
    "CacheConfig",
    "ConfigurationError",
    "NameMatchingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SourceConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_uri",
    "get_source_config",
    "get_storage_config",
    "get_sync_config",
]
