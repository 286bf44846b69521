"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "roonarr"
CACHE_FILENAME: Final[str] = "album_cache.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    cache_filename: str = CACHE_FILENAME
    cache_file_override: Path | None = None

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def cache_path(self, *, ensure: bool = True) -> Path:
        if self.cache_file_override is not None:
            path = self.cache_file_override.expanduser().resolve()
            if ensure:
                path.parent.mkdir(parents=True, exist_ok=True)
            return path
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.cache_filename


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("ROONARR_DATA_DIR")
    env_file = os.getenv("ROONARR_CACHE_FILE")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(
        data_dir=data_dir,
        cache_file_override=Path(env_file) if env_file else None,
    )
