"""Lidarr target-system adapter."""

from __future__ import annotations

from .client import LidarrAPIError, LidarrClient

__all__ = ["LidarrAPIError", "LidarrClient"]
