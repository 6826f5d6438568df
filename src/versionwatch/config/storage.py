"""Locations of the catalog database and the optional HTTP response cache.

Everything lives in one data directory (``VERSIONWATCH_DATA_DIR``, otherwise the
platform's per-user data directory). ``DATABASE_URI`` points the catalog at any
SQLAlchemy database instead of the bundled SQLite file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "versionwatch"
CATALOG_DB_FILENAME: Final[str] = "versionwatch.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"

DATA_DIR_ENV: Final[str] = "VERSIONWATCH_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_uri_override: str | None = None

    def ensure_data_dir(self) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    @property
    def catalog_path(self) -> Path:
        return self.ensure_data_dir() / CATALOG_DB_FILENAME

    @property
    def http_cache_path(self) -> Path:
        return self.ensure_data_dir() / HTTP_CACHE_FILENAME

    @property
    def database_uri(self) -> str:
        if self.database_uri_override:
            return self.database_uri_override
        return f"sqlite+pysqlite:///{self.catalog_path}"


def default_data_dir() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
    else:
        xdg = os.getenv("XDG_DATA_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var(DATA_DIR_ENV)
    return StorageConfig(
        data_dir=Path(data_dir) if data_dir else default_data_dir(),
        database_uri_override=optional_env_var(DATABASE_URI_ENV),
    )


def get_database_uri() -> str:
    return get_storage_config().database_uri


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path
