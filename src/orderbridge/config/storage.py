"""Where orderbridge keeps its database."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_flag

APP_DIR_NAME: Final[str] = "orderbridge"
DEFAULT_DB_FILENAME: Final[str] = "orderbridge.db"
DATA_DIR_VAR: Final[str] = "ORDERBRIDGE_DATA_DIR"
DATABASE_URI_VAR: Final[str] = "DATABASE_URI"
SQL_ECHO_VAR: Final[str] = "ORDERBRIDGE_SQL_ECHO"


def default_data_dir() -> Path:
    """Per-user data directory following the platform's convention."""

    if sys.platform == "win32":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    elif sys.platform == "darwin":
        root = str(Path.home() / "Library" / "Application Support")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root) / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    @property
    def database_path(self) -> Path:
        return self.resolve_data_dir() / self.database_filename

    def sqlite_uri(self) -> str:
        """SQLite URI of the database file; creates the data directory."""

        path = self.database_path
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_VAR)
    return StorageConfig(data_dir=Path(override) if override else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    echo = optional_env_flag(SQL_ECHO_VAR)
    uri = os.getenv(DATABASE_URI_VAR)
    if uri:
        return DatabaseConfig(uri=uri, echo=echo)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri(), echo=echo)
