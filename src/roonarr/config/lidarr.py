"""Lidarr configuration values."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .env import env_int, env_str, require_env_var
from .http_resilience import ResilienceConfig, RetryPolicy

DEFAULT_LIDARR_URL = "http://localhost:8686"
DEFAULT_ROOT_FOLDER = "/data/media/music"
LIDARR_API_PREFIX = "/api/v1/"
LIDARR_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class LidarrConfig:
    """Connection details and the profile settings used for newly added artists."""

    base_url: str
    api_key: str
    root_folder_path: str
    quality_profile_id: int
    metadata_profile_id: int
    resilience: ResilienceConfig


def get_lidarr_config() -> LidarrConfig:
    base_url = env_str("LIDARR_URL", DEFAULT_LIDARR_URL).rstrip("/")
    api_key = require_env_var("LIDARR_API_KEY")

    resilience = ResilienceConfig(
        name="lidarr",
        base_url=f"{base_url}{LIDARR_API_PREFIX}",
        timeout_seconds=LIDARR_TIMEOUT_SECONDS,
        retry=RetryPolicy(
            total=2,
            backoff_factor=1.0,
            max_backoff_wait=10.0,
            retry_on_error_status=True,
            retry_on_exceptions=(httpx.TransportError,),
        ),
        default_headers={"X-Api-Key": api_key, "Content-Type": "application/json"},
    )

    return LidarrConfig(
        base_url=base_url,
        api_key=api_key,
        root_folder_path=env_str("LIDARR_ROOT_FOLDER", DEFAULT_ROOT_FOLDER),
        quality_profile_id=env_int("LIDARR_QUALITY_PROFILE", 1),
        metadata_profile_id=env_int("LIDARR_METADATA_PROFILE", 1),
        resilience=resilience,
    )
