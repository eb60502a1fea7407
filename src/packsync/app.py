"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from packsync.adapters.datasets import HttpDatasetFetcher
from packsync.adapters.notifications import LoggingNotifier
from packsync.adapters.run_guard import PROCESS_RUN_GUARD
from packsync.adapters.sqlalchemy.mappings import DEFAULT_DOCUMENT_TYPE
from packsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyPackCatalog,
    is_started,
    startup,
)
from packsync.config import get_source_config, get_sync_config
from packsync.domain.batch import BatchOrchestrator, DatasetReport, DatasetStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from packsync.adapters.sqlalchemy.store import PackInfo
    from packsync.config import SyncConfig
    from packsync.domain.ports.fetching import DatasetFetcher
    from packsync.domain.ports.locking import RunGuard
    from packsync.domain.ports.notifications import Notifier

CatalogFactory = Callable[[], SqlAlchemyPackCatalog]

ALREADY_RUNNING_MESSAGE = "batch upsert already running"

log = getLogger(__name__)


def _default_catalog_factory() -> CatalogFactory:
    if not is_started():
        startup()
    return SqlAlchemyPackCatalog


def sync_packs(
    config: SyncConfig | None = None,
    *,
    fetcher: DatasetFetcher | None = None,
    catalog_factory: CatalogFactory | None = None,
    guard: RunGuard = PROCESS_RUN_GUARD,
    notifier: Notifier | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[DatasetReport]:
    """Upsert every configured dataset into its pack.

    Returns one report per dataset, or an empty list when another run is
    still holding the guard.
    """

    effective_config = config or get_sync_config()
    if not guard.acquire():
        log.warning(ALREADY_RUNNING_MESSAGE)
        return []

    effective_notifier = notifier or LoggingNotifier(enabled=effective_config.show_notifications)
    try:
        effective_fetcher = fetcher or HttpDatasetFetcher(
            get_source_config(effective_config.base_url)
        )
        effective_catalog = catalog_factory or _default_catalog_factory()
        log.info(
            "Starting batch upsert: datasets=%s, match_by_name=%s, patch_only=%s, paths=%s",
            len(effective_config.datasets),
            effective_config.name_matching.enabled,
            effective_config.patch_only,
            ",".join(effective_config.patch_paths),
        )
        with effective_catalog() as catalog:
            orchestrator = BatchOrchestrator(
                fetch=effective_fetcher,
                resolve_store=catalog.resolve,
                config=effective_config,
                notifier=effective_notifier,
                sleep=sleep,
            )
            reports = orchestrator.run(effective_config.datasets)
    finally:
        guard.release()

    for line in format_summary_table(reports).splitlines():
        log.info(line)
    effective_notifier.info("Batch upsert complete.")
    return reports


def format_summary_table(reports: Sequence[DatasetReport]) -> str:
    header = f"{'pack':<40} {'status':<13} {'by-name':>7} {'by-id':>6} {'new':>5} {'fail':>5}"
    rows = [header, "-" * len(header)]
    for report in reports:
        target = report.label or report.collection or report.dataset
        if report.status is DatasetStatus.OK:
            rows.append(
                f"{target:<40} {report.status:<13} {report.name_matched_updates:>7} "
                f"{report.id_matched_updates:>6} {report.created:>5} {report.failed:>5}"
            )
        else:
            rows.append(f"{target:<40} {report.status:<13}")
    return "\n".join(rows)


def register_pack(
    collection: str,
    *,
    label: str | None = None,
    document_type: str = DEFAULT_DOCUMENT_TYPE,
    system: str | None = None,
    locked: bool = False,
    catalog_factory: CatalogFactory | None = None,
) -> PackInfo:
    """Create an empty pack that datasets can be synchronised into."""

    effective_catalog = catalog_factory or _default_catalog_factory()
    with effective_catalog() as catalog:
        return catalog.add_pack(
            collection=collection,
            label=label,
            document_type=document_type,
            system=system,
            locked=locked,
        )


def list_packs(*, catalog_factory: CatalogFactory | None = None) -> list[PackInfo]:
    effective_catalog = catalog_factory or _default_catalog_factory()
    with effective_catalog() as catalog:
        return catalog.list_packs()
