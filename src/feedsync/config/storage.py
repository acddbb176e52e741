"""Where the catalog database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATA_DIR_ENV: Final[str] = "FEEDSYNC_DATA_DIR"
DATABASE_FILENAME: Final[str] = "feedsync.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Directory that holds the default SQLite catalog file."""

    data_dir: Path

    @property
    def database_file(self) -> Path:
        return self.data_dir.expanduser().resolve() / DATABASE_FILENAME

    def sqlite_uri(self) -> str:
        """Create the data directory if needed and point SQLite at the catalog file."""

        database_file = self.database_file
        database_file.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{database_file}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV)
    data_dir = Path(configured) if configured else _platform_data_home() / "feedsync"
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv(DATABASE_URI_ENV)
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri())
