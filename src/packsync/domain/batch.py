"""Batch orchestration of upserts across several datasets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .dataset import InvalidDatasetError, parse_dataset
from .identity import NameNormalizer
from .pack_index import build_pack_index
from .ports.fetching import DatasetFetchError
from .upsert import OperationKind, UpsertEngine, UpsertPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from packsync.config import SyncConfig

    from .identity import MatchKey
    from .pack_index import PackIndex
    from .ports.fetching import DatasetFetcher
    from .ports.notifications import Notifier
    from .ports.store import RecordStore, StoreResolver
    from .records import Record
    from .upsert import MatchConflict, OperationResult

log = logging.getLogger(__name__)


class DatasetStatus(StrEnum):
    OK = "ok"
    FETCH_FAILED = "fetch-failed"
    BAD_JSON = "bad-json"
    NO_PACK = "no-pack"
    STORE_FAILED = "store-failed"
    INDEX_FAILED = "index-failed"


@dataclass(frozen=True, slots=True)
class RecordFailure:
    record_id: str | None
    name: str | None
    reason: str


@dataclass(slots=True)
class DatasetReport:
    """Outcome of synchronising a single dataset."""

    dataset: str
    status: DatasetStatus = DatasetStatus.OK
    collection: str | None = None
    label: str | None = None
    name_matched_updates: int = 0
    id_matched_updates: int = 0
    created: int = 0
    failed: int = 0
    failures: list[RecordFailure] = field(default_factory=list[RecordFailure])
    conflicts: list[MatchConflict] = field(default_factory=list["MatchConflict"])
    duplicate_names: dict[MatchKey, list[str]] = field(default_factory=dict[str, list[str]])

    @property
    def processed(self) -> int:
        return self.name_matched_updates + self.id_matched_updates + self.created + self.failed

    def record(self, result: OperationResult) -> None:
        match result.kind:
            case OperationKind.NAME_MATCHED_UPDATE:
                self.name_matched_updates += 1
            case OperationKind.ID_MATCHED_UPDATE:
                self.id_matched_updates += 1
            case OperationKind.CREATED:
                self.created += 1
            case OperationKind.FAILED:
                self.failed += 1
                self.failures.append(
                    RecordFailure(
                        record_id=result.record_id,
                        name=result.name,
                        reason=str(result.error) if result.error else "unknown error",
                    )
                )
        if result.conflict is not None:
            self.conflicts.append(result.conflict)

    def summary(self) -> str:
        if self.status is not DatasetStatus.OK:
            target = f" ({self.collection})" if self.collection else ""
            return f"{self.dataset}{target}: {self.status}"
        return (
            f"{self.label or self.collection}: {self.name_matched_updates} name-updated, "
            f"{self.id_matched_updates} id-updated, {self.created} created, "
            f"{self.failed} failed"
        )


def chunked(records: Sequence[Record], size: int) -> Iterator[Sequence[Record]]:
    for start in range(0, len(records), size):
        yield records[start : start + size]


@dataclass(slots=True)
class BatchOrchestrator:
    """Drive the upsert engine over datasets, one dataset at a time.

    Any problem with a dataset (unreachable, malformed, unknown pack) only
    skips that dataset, and a failing record only marks that record failed:
    ``run`` always returns a report for every dataset it was given.
    """

    fetch: DatasetFetcher
    resolve_store: StoreResolver
    config: SyncConfig
    notifier: Notifier
    sleep: Callable[[float], None]
    engine: UpsertEngine = field(init=False)

    def __post_init__(self) -> None:
        matching = self.config.name_matching
        self.engine = UpsertEngine(
            normalizer=NameNormalizer(
                remove_diacritics=matching.remove_diacritics,
                collapse_whitespace=matching.collapse_whitespace,
            ),
            policy=UpsertPolicy.from_paths(
                match_by_name=matching.enabled,
                patch_only=self.config.patch_only,
                patch_paths=self.config.patch_paths,
            ),
        )

    def run(self, datasets: Iterable[str]) -> list[DatasetReport]:
        reports: list[DatasetReport] = []
        for position, dataset in enumerate(datasets):
            if position and self.config.pause_seconds:
                self.sleep(self.config.pause_seconds)
            reports.append(self.process_dataset(dataset))
        return reports

    def process_dataset(self, dataset: str) -> DatasetReport:
        report = DatasetReport(dataset=dataset)
        self.notifier.info(f"Fetching {dataset}…")

        try:
            raw = self.fetch(dataset)
        except DatasetFetchError as exc:
            log.error("Fetch failed for %s: %s", dataset, exc.reason)  # noqa: TRY400
            self.notifier.error(f"Fetch failed: {dataset}")
            report.status = DatasetStatus.FETCH_FAILED
            return report
        except Exception:
            log.exception("Fetch failed for %s", dataset)
            self.notifier.error(f"Fetch failed: {dataset}")
            report.status = DatasetStatus.FETCH_FAILED
            return report

        try:
            payload = parse_dataset(dataset, raw)
        except InvalidDatasetError as exc:
            log.error("%s", exc)  # noqa: TRY400
            self.notifier.error(f"Invalid JSON in {dataset}")
            report.status = DatasetStatus.BAD_JSON
            return report

        report.collection = payload.pack.collection
        try:
            store = self.resolve_store(payload.pack.collection)
        except Exception:
            log.exception("Could not open pack %s for %s", payload.pack.collection, dataset)
            self.notifier.error(f"Could not open pack: {payload.pack.collection}")
            report.status = DatasetStatus.STORE_FAILED
            return report
        if store is None:
            log.error("Pack missing for %s: %s", dataset, payload.pack.collection)
            self.notifier.error(f"Pack missing: {payload.pack.collection}")
            report.status = DatasetStatus.NO_PACK
            return report
        report.label = store.label

        self._unlock_if_needed(store)

        try:
            index = build_pack_index(store, self.engine.normalizer)
        except Exception:
            log.exception("Could not index pack %s", store.collection)
            self.notifier.error(f"Could not read pack index: {store.collection}")
            report.status = DatasetStatus.INDEX_FAILED
            return report
        report.duplicate_names = {key: list(ids) for key, ids in index.duplicates.items()}

        self._process_records(payload.documents, index, store, report)
        self._refresh_index(store)

        log.info("Finished %s: %s", dataset, report.summary())
        self.notifier.info(report.summary())
        return report

    def _process_records(
        self,
        records: Sequence[Record],
        index: PackIndex,
        store: RecordStore,
        report: DatasetReport,
    ) -> None:
        total = len(records)
        for chunk in chunked(records, self.config.chunk_size):
            for record in chunk:
                result = self.engine.upsert(record, index=index, store=store)
                report.record(result)
                if not result.ok:
                    self.notifier.warn(f"Fail: {result.name or result.record_id}")
            log.debug("%s: processed %s/%s records", store.collection, report.processed, total)

    def _unlock_if_needed(self, store: RecordStore) -> None:
        if not (store.locked and self.config.unlock_if_locked):
            return
        try:
            store.unlock()
        except Exception:  # noqa: BLE001
            log.warning("Unlock failed for %s", store.collection, exc_info=True)
            return
        self.notifier.info(f"Unlocked {store.label}")

    def _refresh_index(self, store: RecordStore) -> None:
        try:
            store.refresh_index()
        except Exception:  # noqa: BLE001
            log.warning("Index refresh failed for %s", store.collection, exc_info=True)
