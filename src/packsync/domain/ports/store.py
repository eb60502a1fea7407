"""Port describing the target record store a pack is synchronised into."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from packsync.domain.records import JsonValue, Record


class StoreError(RuntimeError):
    """Base class for failures raised by record store implementations."""


class PackLockedError(StoreError):
    """Raised when writing to a pack that is locked."""


class MissingIdentifierError(StoreError):
    """Raised when a record cannot be created because it has no identifier."""


class DuplicateRecordError(StoreError):
    """Raised when creating a record whose identifier already exists."""


class RecordNotFoundError(StoreError):
    """Raised when updating a record that does not exist."""


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """Lightweight listing row: enough to match records without loading them."""

    record_id: str
    name: str | None
    type: str | None


@runtime_checkable
class RecordStore(Protocol):
    """Capabilities the upsert engine needs from a pack."""

    @property
    def collection(self) -> str: ...

    @property
    def label(self) -> str: ...

    @property
    def document_type(self) -> str:
        """Type assumed for records that do not declare one."""
        ...

    @property
    def locked(self) -> bool: ...

    def list_index(self) -> Sequence[IndexEntry]: ...

    def get(self, record_id: str) -> Record | None: ...

    def update(self, record_id: str, changes: Mapping[str, JsonValue]) -> None:
        """Deep-merge ``changes`` into the stored record."""
        ...

    def replace(self, record_id: str, record: Mapping[str, JsonValue]) -> None:
        """Overwrite the stored record's content, keeping ``record_id``."""
        ...

    def create_preserving_identity(self, record: Record) -> str:
        """Insert ``record`` under its own ``_id`` and return that identifier."""
        ...

    def unlock(self) -> None: ...

    def refresh_index(self) -> None: ...


StoreResolver = Callable[[str], "RecordStore | None"]
