"""Read datasets from a local directory of JSON exports."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from packsync.domain.ports.fetching import DatasetFetchError

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class DirectoryDatasetFetcher:
    root: Path

    def __call__(self, dataset: str) -> object:
        path = self.root / dataset
        try:
            with path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except OSError as exc:
            raise DatasetFetchError(dataset, exc.strerror or str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise DatasetFetchError(dataset, f"invalid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise DatasetFetchError(dataset, f"not valid UTF-8 ({exc.reason})") from exc
