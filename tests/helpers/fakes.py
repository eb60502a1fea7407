"""Reusable in-memory fakes for the record store, fetcher and notifier ports."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from packsync.domain.ports.fetching import DatasetFetchError
from packsync.domain.ports.store import (
    DuplicateRecordError,
    IndexEntry,
    MissingIdentifierError,
    PackLockedError,
    RecordNotFoundError,
)
from packsync.domain.records import deep_merge, record_identifier, record_name, record_type

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from packsync.domain.records import JsonValue, Record


def make_record(
    record_id: str | None,
    name: str,
    *,
    type_: str | None = "Item",
    description: str | None = None,
    **extra: JsonValue,
) -> Record:
    record: Record = {"name": name}
    if record_id is not None:
        record["_id"] = record_id
    if type_ is not None:
        record["type"] = type_
    if description is not None:
        record["system"] = {"description": description}
    record.update(extra)
    return record


def make_dataset(collection: str, records: Iterable[Record], **pack: str) -> dict[str, object]:
    return {"pack": {"collection": collection, **pack}, "documents": list(records)}


@dataclass
class InMemoryRecordStore:
    """Dictionary-backed pack with hooks for simulating failures."""

    collection: str = "world.test"
    label: str = "Test Pack"
    document_type: str = "Item"
    locked: bool = False
    records: dict[str, Record] = field(default_factory=dict[str, "Record"])
    failing_ids: set[str] = field(default_factory=set[str])
    fail_unlock: bool = False
    fail_index: bool = False
    fail_refresh: bool = False
    updates: list[tuple[str, Record]] = field(default_factory=list[tuple[str, "Record"]])
    replacements: list[tuple[str, Record]] = field(default_factory=list[tuple[str, "Record"]])
    created: list[str] = field(default_factory=list[str])
    refresh_count: int = 0
    unlock_count: int = 0

    @classmethod
    def with_records(cls, *records: Record, **kwargs: object) -> InMemoryRecordStore:
        store = cls(**kwargs)  # type: ignore[arg-type]
        for record in records:
            record_id = record_identifier(record)
            assert record_id is not None
            store.records[record_id] = deepcopy(record)
        return store

    def list_index(self) -> Sequence[IndexEntry]:
        if self.fail_index:
            raise RuntimeError("index unavailable")
        return [
            IndexEntry(record_id=record_id, name=record_name(data), type=record_type(data))
            for record_id, data in self.records.items()
        ]

    def get(self, record_id: str) -> Record | None:
        record = self.records.get(record_id)
        return None if record is None else deepcopy(record)

    def update(self, record_id: str, changes: Mapping[str, JsonValue]) -> None:
        self._check_write(record_id)
        if record_id not in self.records:
            raise RecordNotFoundError(record_id)
        self.updates.append((record_id, deepcopy(dict(changes))))
        deep_merge(self.records[record_id], changes)

    def replace(self, record_id: str, record: Mapping[str, JsonValue]) -> None:
        self._check_write(record_id)
        if record_id not in self.records:
            raise RecordNotFoundError(record_id)
        self.replacements.append((record_id, deepcopy(dict(record))))
        self.records[record_id] = deepcopy(dict(record))

    def create_preserving_identity(self, record: Record) -> str:
        record_id = record_identifier(record)
        if record_id is None:
            raise MissingIdentifierError("record has no _id")
        self._check_write(record_id)
        if record_id in self.records:
            raise DuplicateRecordError(record_id)
        self.records[record_id] = deepcopy(record)
        self.created.append(record_id)
        return record_id

    def unlock(self) -> None:
        self.unlock_count += 1
        if self.fail_unlock:
            raise RuntimeError("permission denied")
        self.locked = False

    def refresh_index(self) -> None:
        self.refresh_count += 1
        if self.fail_refresh:
            raise RuntimeError("refresh unavailable")

    def _check_write(self, record_id: str) -> None:
        if self.locked:
            raise PackLockedError(self.collection)
        if record_id in self.failing_ids:
            raise RuntimeError(f"write rejected for {record_id}")


@dataclass
class FakeFetcher:
    """Serve prepared payloads; unknown datasets fail like a 404."""

    payloads: dict[str, object] = field(default_factory=dict[str, object])
    requested: list[str] = field(default_factory=list[str])

    def __call__(self, dataset: str) -> object:
        self.requested.append(dataset)
        if dataset not in self.payloads:
            raise DatasetFetchError(dataset, "404 Not Found")
        return deepcopy(self.payloads[dataset])


@dataclass
class RecordingNotifier:
    messages: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of_level(self, level: str) -> list[str]:
        return [message for kind, message in self.messages if kind == level]


class StoreCatalog:
    """Resolver over a fixed set of in-memory stores."""

    def __init__(self, *stores: InMemoryRecordStore) -> None:
        self.stores = {store.collection: store for store in stores}

    def __call__(self, collection: str) -> InMemoryRecordStore | None:
        return self.stores.get(collection)


if TYPE_CHECKING:
    from packsync.domain.ports.fetching import DatasetFetcher
    from packsync.domain.ports.notifications import Notifier
    from packsync.domain.ports.store import RecordStore

    _store_check: RecordStore = InMemoryRecordStore()
    _fetcher_check: DatasetFetcher = FakeFetcher()
    _notifier_check: Notifier = RecordingNotifier()
