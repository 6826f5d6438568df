"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError, InvalidTargetsFileError
from .github import GitHubConfig, get_github_config
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    http_cache_config,
    upstream_resilience,
)
from .logging import configure_logging
from .storage import StorageConfig, get_database_uri, get_http_cache_path, get_storage_config
from .targets import CollectionConfig, TargetConfig, load_collection_config, parse_targets

__all__ = [
    "CacheConfig",
    "CollectionConfig",
    "ConfigurationError",
    "GitHubConfig",
    "InvalidTargetsFileError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "TargetConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_database_uri",
    "get_github_config",
    "get_http_cache_path",
    "get_storage_config",
    "http_cache_config",
    "load_collection_config",
    "optional_env_var",
    "parse_targets",
    "upstream_resilience",
]
