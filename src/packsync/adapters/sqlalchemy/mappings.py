"""SQLAlchemy table metadata for packs and their records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

DEFAULT_DOCUMENT_TYPE = "Item"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

pack_table = Table(
    "pack",
    metadata,
    Column("collection", String(255), primary_key=True),
    Column("label", String(255), nullable=False),
    Column("document_type", String(64), nullable=False, default=DEFAULT_DOCUMENT_TYPE),
    Column("system", String(64), nullable=True),
    Column("locked", Boolean, nullable=False, default=False),
)

pack_record_table = Table(
    "pack_record",
    metadata,
    Column(
        "collection",
        String(255),
        ForeignKey("pack.collection", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("record_id", String(64), primary_key=True),
    Column("name", String(512), nullable=True),
    Column("type", String(64), nullable=True),
    Column("data", JSON, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_pack_record_collection_name", "collection", "name"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
