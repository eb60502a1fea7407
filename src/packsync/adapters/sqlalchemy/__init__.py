"""SQLAlchemy adapter package for packsync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, pack_record_table, pack_table
from .store import PackInfo, SqlAlchemyPackStore
from .unit_of_work import (
    PackExistsError,
    SqlAlchemyPackCatalog,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "PackExistsError",
    "PackInfo",
    "SqlAlchemyPackCatalog",
    "SqlAlchemyPackStore",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "pack_record_table",
    "pack_table",
    "shutdown",
    "startup",
]
