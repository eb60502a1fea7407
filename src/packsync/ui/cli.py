from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from packsync.adapters.datasets import DirectoryDatasetFetcher
from packsync.app import list_packs, register_pack, sync_packs
from packsync.config import (
    ConfigurationError,
    NameMatchingConfig,
    configure_logging,
    get_sync_config,
)
from packsync.domain.batch import DatasetStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from packsync.config import SyncConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upsert canonical datasets into packs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Upsert datasets into their packs")
    source = sync.add_mutually_exclusive_group()
    source.add_argument("--base-url", type=str, help="Location the datasets are fetched from")
    source.add_argument(
        "--source-dir",
        type=Path,
        help="Read datasets from a local directory instead of over HTTP",
    )
    sync.add_argument(
        "--dataset",
        dest="datasets",
        action="append",
        help="Dataset file name to process (repeatable, defaults to config)",
    )
    sync.add_argument(
        "--no-name-match",
        action="store_true",
        help="Match records by identifier only",
    )
    sync.add_argument(
        "--keep-diacritics",
        action="store_true",
        help="Do not strip diacritics when comparing names",
    )
    sync.add_argument(
        "--keep-whitespace",
        action="store_true",
        help="Do not collapse whitespace runs when comparing names",
    )
    sync.add_argument(
        "--full-replace",
        action="store_true",
        help="Replace matched records entirely instead of patching selected fields",
    )
    sync.add_argument(
        "--patch-path",
        dest="patch_paths",
        action="append",
        help="Dot-separated field to copy in patch mode (repeatable)",
    )
    sync.add_argument("--chunk-size", type=int, help="Records processed per chunk")
    sync.add_argument(
        "--no-unlock",
        action="store_true",
        help="Leave locked packs locked (their writes then fail)",
    )
    sync.add_argument("--pause", type=float, help="Seconds to wait between datasets")
    sync.add_argument("--quiet", action="store_true", help="Suppress progress notifications")

    pack = subparsers.add_parser("pack", help="Pack management commands")
    pack_sub = pack.add_subparsers(dest="pack_command", required=True)
    pack_add = pack_sub.add_parser("add", help="Register an empty pack")
    pack_add.add_argument("collection", type=str, help="Collection identifier, e.g. world.bonds")
    pack_add.add_argument("--label", type=str, help="Human readable pack label")
    pack_add.add_argument(
        "--document-type",
        type=str,
        default="Item",
        help="Type assumed for records without one (default: %(default)s)",
    )
    pack_add.add_argument("--system", type=str, help="Game system the pack belongs to")
    pack_add.add_argument("--locked", action="store_true", help="Register the pack locked")
    pack_sub.add_parser("list", help="List registered packs")

    return parser.parse_args(list(argv))


def _build_sync_config(args: argparse.Namespace, base: SyncConfig) -> SyncConfig:
    matching = base.name_matching
    name_matching = NameMatchingConfig(
        enabled=matching.enabled and not args.no_name_match,
        remove_diacritics=matching.remove_diacritics and not args.keep_diacritics,
        collapse_whitespace=matching.collapse_whitespace and not args.keep_whitespace,
    )
    return base.with_overrides(
        base_url=args.base_url,
        datasets=tuple(args.datasets) if args.datasets else None,
        name_matching=name_matching,
        patch_only=False if args.full_replace else None,
        patch_paths=tuple(args.patch_paths) if args.patch_paths else None,
        chunk_size=args.chunk_size,
        unlock_if_locked=False if args.no_unlock else None,
        pause_seconds=args.pause,
        show_notifications=False if args.quiet else None,
    )


def _run_sync(args: argparse.Namespace, config: SyncConfig) -> None:
    fetcher = DirectoryDatasetFetcher(args.source_dir) if args.source_dir else None
    reports = sync_packs(config, fetcher=fetcher)
    skipped = [report.dataset for report in reports if report.status is not DatasetStatus.OK]
    if skipped:
        log.warning("Skipped %s dataset(s): %s", len(skipped), ", ".join(skipped))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    config: SyncConfig | None = None
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        if parsed_args.command == "sync":
            config = _build_sync_config(parsed_args, get_sync_config())
    except (ValueError, ConfigurationError):
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync" and config is not None:
            _run_sync(parsed_args, config)
        elif parsed_args.command == "pack" and parsed_args.pack_command == "add":
            info = register_pack(
                parsed_args.collection,
                label=parsed_args.label,
                document_type=parsed_args.document_type,
                system=parsed_args.system,
                locked=parsed_args.locked,
            )
            log.info("Created pack %s", info.collection)
        elif parsed_args.command == "pack" and parsed_args.pack_command == "list":
            for info in list_packs():
                state = "locked" if info.locked else "unlocked"
                log.info("%s\t%s\t%s\t%s", info.collection, info.label, info.document_type, state)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
