"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, env_str, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .lidarr import LidarrConfig, get_lidarr_config
from .musicbrainz import MusicBrainzConfig, get_musicbrainz_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "LidarrConfig",
    "MissingConfigurationError",
    "MusicBrainzConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "env_int",
    "env_str",
    "get_lidarr_config",
    "get_musicbrainz_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]
