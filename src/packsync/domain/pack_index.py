"""Lookup structures over the records already present in a pack."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from packsync.domain.identity import MatchKey, NameNormalizer
    from packsync.domain.ports.store import RecordStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PackIndex:
    """Identifier set plus match-key map for one dataset's processing.

    ``names`` keeps the first identifier seen per key; later collisions are
    only recorded in ``duplicates`` and never used for matching. The index is
    updated in place as records get created so later records of the same run
    can match them.
    """

    default_type: str
    identifiers: set[str] = field(default_factory=set[str])
    names: dict[MatchKey, str] = field(default_factory=dict[str, str])
    duplicates: dict[MatchKey, list[str]] = field(default_factory=dict[str, list[str]])

    def add(self, record_id: str, key: MatchKey) -> None:
        """Register an existing record while building the index."""

        self.identifiers.add(record_id)
        first = self.names.setdefault(key, record_id)
        if first != record_id:
            self.duplicates.setdefault(key, []).append(record_id)

    def register(self, record_id: str, key: MatchKey) -> None:
        """Register a record created during the run."""

        self.identifiers.add(record_id)
        self.names.setdefault(key, record_id)

    def lookup_name(self, key: MatchKey) -> str | None:
        return self.names.get(key)

    def has_identifier(self, record_id: str | None) -> bool:
        return record_id is not None and record_id in self.identifiers


def build_pack_index(store: RecordStore, normalizer: NameNormalizer) -> PackIndex:
    default_type = store.document_type
    index = PackIndex(default_type=default_type)
    for entry in store.list_index():
        key = normalizer.match_key(entry.name, entry.type, default_type)
        index.add(entry.record_id, key)

    if index.duplicates:
        log.warning(
            "Duplicate names detected in pack %s: %s",
            store.collection,
            index.duplicates,
        )
    return index
