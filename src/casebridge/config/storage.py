"""Location of the case database.

``DATABASE_URI`` wins. Without it the database is a SQLite file in
``CASEBRIDGE_DATA_DIR``, falling back to ``$XDG_DATA_HOME/casebridge``
(``~/.local/share/casebridge`` when ``XDG_DATA_HOME`` is unset).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "casebridge"
DATABASE_FILENAME: Final[str] = "casebridge.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def data_dir() -> Path:
    configured = os.getenv("CASEBRIDGE_DATA_DIR")
    if configured:
        return Path(configured).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / APP_DIR_NAME).expanduser().resolve()


def sqlite_uri(directory: Path) -> str:
    """URI of the database file in ``directory``, creating the directory."""

    directory.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{directory / DATABASE_FILENAME}"


def get_database_config() -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=sqlite_uri(data_dir()))
