"""Per-record upsert decisions: name match, identifier match or create."""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .patching import build_patch
from .records import (
    ID_FIELD,
    FieldPath,
    describe_record,
    record_identifier,
    record_name,
    record_type,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .identity import MatchKey, NameNormalizer
    from .pack_index import PackIndex
    from .ports.store import RecordStore
    from .records import JsonValue, Record

log = logging.getLogger(__name__)


class OperationKind(StrEnum):
    NAME_MATCHED_UPDATE = "name-matched-update"
    ID_MATCHED_UPDATE = "id-matched-update"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class MatchConflict:
    """Name and identifier point at two different existing records.

    The name match wins; the conflict is surfaced so an unintended update can
    be spotted in the run report.
    """

    key: MatchKey
    name_target: str
    identifier_target: str


@dataclass(frozen=True, slots=True)
class OperationResult:
    kind: OperationKind
    record_id: str | None
    name: str | None
    error: Exception | None = None
    conflict: MatchConflict | None = None

    @property
    def ok(self) -> bool:
        return self.kind is not OperationKind.FAILED


@dataclass(frozen=True, slots=True)
class UpsertPolicy:
    match_by_name: bool = True
    patch_only: bool = True
    patch_paths: tuple[FieldPath, ...] = field(
        default_factory=lambda: (FieldPath.parse("system.description"),)
    )

    @classmethod
    def from_paths(
        cls,
        *,
        match_by_name: bool,
        patch_only: bool,
        patch_paths: tuple[str, ...],
    ) -> UpsertPolicy:
        return cls(
            match_by_name=match_by_name,
            patch_only=patch_only,
            patch_paths=tuple(FieldPath.parse(path) for path in patch_paths),
        )


@dataclass(slots=True)
class UpsertEngine:
    normalizer: NameNormalizer
    policy: UpsertPolicy = field(default_factory=UpsertPolicy)

    def upsert(self, record: Record, *, index: PackIndex, store: RecordStore) -> OperationResult:
        """Apply one source record to ``store``; never raises for record-level errors."""

        try:
            return self._upsert(record, index=index, store=store)
        except Exception as exc:  # noqa: BLE001
            log.exception("Upsert failed for %s", describe_record(record))
            return OperationResult(
                kind=OperationKind.FAILED,
                record_id=record_identifier(record),
                name=record_name(record),
                error=exc,
            )

    def _upsert(self, record: Record, *, index: PackIndex, store: RecordStore) -> OperationResult:
        key = self.normalizer.match_key(
            record.get("name"), record_type(record), index.default_type
        )
        source_id = record_identifier(record)

        if self.policy.match_by_name:
            target_id = index.lookup_name(key)
            if target_id is not None and store.get(target_id) is not None:
                conflict = self._detect_conflict(key, target_id, source_id, index)
                self._apply_update(record, target_id, store)
                return OperationResult(
                    kind=OperationKind.NAME_MATCHED_UPDATE,
                    record_id=target_id,
                    name=record_name(record),
                    conflict=conflict,
                )

        if source_id is not None and index.has_identifier(source_id):
            if store.get(source_id) is not None:
                self._apply_update(record, source_id, store)
                return OperationResult(
                    kind=OperationKind.ID_MATCHED_UPDATE,
                    record_id=source_id,
                    name=record_name(record),
                )

        created_id = store.create_preserving_identity(deepcopy(record))
        index.register(created_id, key)
        return OperationResult(
            kind=OperationKind.CREATED,
            record_id=created_id,
            name=record_name(record),
        )

    def _apply_update(
        self, record: Mapping[str, JsonValue], target_id: str, store: RecordStore
    ) -> None:
        if self.policy.patch_only:
            patch = build_patch(record, self.policy.patch_paths)
            patch[ID_FIELD] = target_id
            store.update(target_id, patch)
            return
        replacement = deepcopy(dict(record))
        replacement[ID_FIELD] = target_id
        store.replace(target_id, replacement)

    @staticmethod
    def _detect_conflict(
        key: MatchKey,
        name_target: str,
        source_id: str | None,
        index: PackIndex,
    ) -> MatchConflict | None:
        if source_id is None or source_id == name_target:
            return None
        if not index.has_identifier(source_id):
            return None
        log.warning(
            "Match conflict for %s: name resolves to %s but identifier %s also exists",
            key,
            name_target,
            source_id,
        )
        return MatchConflict(key=key, name_target=name_target, identifier_target=source_id)
