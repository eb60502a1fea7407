"""Record store backed by a SQLAlchemy session."""

from __future__ import annotations

from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import insert, select
from sqlalchemy import update as sql_update

from packsync.domain.ports.store import (
    DuplicateRecordError,
    IndexEntry,
    MissingIdentifierError,
    PackLockedError,
    RecordNotFoundError,
)
from packsync.domain.records import (
    ID_FIELD,
    TYPE_FIELD,
    deep_merge,
    record_identifier,
    record_name,
    record_type,
)

from .mappings import pack_record_table, pack_table

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from sqlalchemy.orm import Session

    from packsync.domain.records import JsonValue, Record


@dataclass(frozen=True, slots=True)
class PackInfo:
    collection: str
    label: str
    document_type: str
    system: str | None = None
    locked: bool = False


class SqlAlchemyPackStore:
    """One pack's records; every successful write is committed on its own."""

    def __init__(self, session: Session, info: PackInfo) -> None:
        self.session = session
        self._info = info
        self._locked = info.locked
        self._index: list[IndexEntry] | None = None

    @property
    def collection(self) -> str:
        return self._info.collection

    @property
    def label(self) -> str:
        return self._info.label

    @property
    def document_type(self) -> str:
        return self._info.document_type

    @property
    def locked(self) -> bool:
        return self._locked

    def list_index(self) -> Sequence[IndexEntry]:
        if self._index is None:
            stmt = (
                select(
                    pack_record_table.c.record_id,
                    pack_record_table.c.name,
                    pack_record_table.c.type,
                )
                .where(pack_record_table.c.collection == self.collection)
                .order_by(pack_record_table.c.record_id)
            )
            self._index = [
                IndexEntry(record_id=row.record_id, name=row.name, type=row.type)
                for row in self.session.execute(stmt)
            ]
        return tuple(self._index)

    def refresh_index(self) -> None:
        self._index = None
        self.list_index()

    def get(self, record_id: str) -> Record | None:
        stmt = select(pack_record_table.c.data).where(
            pack_record_table.c.collection == self.collection,
            pack_record_table.c.record_id == record_id,
        )
        data = self.session.execute(stmt).scalar_one_or_none()
        if data is None:
            return None
        record = cast("Record", deepcopy(data))
        record[ID_FIELD] = record_id
        return record

    def update(self, record_id: str, changes: Mapping[str, JsonValue]) -> None:
        self._ensure_writable()
        current = self.get(record_id)
        if current is None:
            raise RecordNotFoundError(f"No record {record_id} in {self.collection}")
        merged = deep_merge(current, changes)
        merged[ID_FIELD] = record_id
        self._write_existing(record_id, merged)

    def replace(self, record_id: str, record: Mapping[str, JsonValue]) -> None:
        self._ensure_writable()
        if self.get(record_id) is None:
            raise RecordNotFoundError(f"No record {record_id} in {self.collection}")
        replacement = self._typed_copy(record)
        replacement[ID_FIELD] = record_id
        self._write_existing(record_id, replacement)

    def create_preserving_identity(self, record: Record) -> str:
        self._ensure_writable()
        record_id = record_identifier(record)
        if record_id is None:
            raise MissingIdentifierError(
                f"Cannot create {record_name(record)!r} in {self.collection} without an _id"
            )
        if self.get(record_id) is not None:
            raise DuplicateRecordError(f"Record {record_id} already exists in {self.collection}")

        data = self._typed_copy(record)
        data[ID_FIELD] = record_id
        with self._transaction():
            self.session.execute(
                insert(pack_record_table).values(
                    collection=self.collection,
                    record_id=record_id,
                    name=record_name(data),
                    type=record_type(data),
                    data=data,
                    updated_at=datetime.now(UTC),
                )
            )
        return record_id

    def unlock(self) -> None:
        with self._transaction():
            self.session.execute(
                sql_update(pack_table)
                .where(pack_table.c.collection == self.collection)
                .values(locked=False)
            )
        self._locked = False

    def _typed_copy(self, record: Mapping[str, JsonValue]) -> Record:
        data: dict[str, Any] = deepcopy(dict(record))
        if record_type(data) is None:
            data[TYPE_FIELD] = self.document_type
        return data

    def _ensure_writable(self) -> None:
        if self._locked:
            raise PackLockedError(f"Pack {self.collection} is locked")

    def _write_existing(self, record_id: str, data: Record) -> None:
        with self._transaction():
            self.session.execute(
                sql_update(pack_record_table)
                .where(
                    pack_record_table.c.collection == self.collection,
                    pack_record_table.c.record_id == record_id,
                )
                .values(
                    name=record_name(data),
                    type=record_type(data),
                    data=data,
                    updated_at=datetime.now(UTC),
                )
            )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
        except Exception:
            self.session.rollback()
            raise
        self.session.commit()
