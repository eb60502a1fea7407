"""Where the pack database and the HTTP cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "packsync"
DEFAULT_DB_FILENAME: Final[str] = "packs.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def ensure_data_dir(self) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.ensure_data_dir() / DEFAULT_DB_FILENAME}"

    def http_cache_path(self) -> Path:
        return self.ensure_data_dir() / HTTP_CACHE_FILENAME


def _platform_data_home() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("PACKSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_uri(*, storage: StorageConfig | None = None) -> str:
    """Compute the database URI, respecting the ``DATABASE_URI`` override."""

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return env_uri
    return (storage or get_storage_config()).database_uri()
