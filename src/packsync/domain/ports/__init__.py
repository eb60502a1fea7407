"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import DatasetFetcher, DatasetFetchError
from .locking import RunGuard
from .notifications import Notifier
from .store import (
    DuplicateRecordError,
    IndexEntry,
    MissingIdentifierError,
    PackLockedError,
    RecordNotFoundError,
    RecordStore,
    StoreError,
    StoreResolver,
)

__all__ = [
    "DatasetFetchError",
    "DatasetFetcher",
    "DuplicateRecordError",
    "IndexEntry",
    "MissingIdentifierError",
    "Notifier",
    "PackLockedError",
    "RecordNotFoundError",
    "RecordStore",
    "RunGuard",
    "StoreError",
    "StoreResolver",
]
