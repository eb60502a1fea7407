from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from packsync.adapters.datasets import DirectoryDatasetFetcher
from packsync.domain.ports.fetching import DatasetFetchError

if TYPE_CHECKING:
    from pathlib import Path


def test_reads_dataset_file(tmp_path: Path) -> None:
    payload = {"pack": {"collection": "world.bonds"}, "documents": [{"_id": "a", "name": "Ō"}]}
    (tmp_path / "bonds.json").write_text(json.dumps(payload), encoding="utf-8")

    assert DirectoryDatasetFetcher(tmp_path)("bonds.json") == payload


def test_missing_file_raises_fetch_error(tmp_path: Path) -> None:
    with pytest.raises(DatasetFetchError) as excinfo:
        DirectoryDatasetFetcher(tmp_path)("absent.json")

    assert excinfo.value.dataset == "absent.json"


def test_invalid_json_raises_fetch_error(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{", encoding="utf-8")

    with pytest.raises(DatasetFetchError, match="invalid JSON"):
        DirectoryDatasetFetcher(tmp_path)("broken.json")


def test_undecodable_file_raises_fetch_error(tmp_path: Path) -> None:
    (tmp_path / "latin1.json").write_bytes(b'{"pack": {"collection": "w\xff"}}')

    with pytest.raises(DatasetFetchError, match="UTF-8") as excinfo:
        DirectoryDatasetFetcher(tmp_path)("latin1.json")

    assert excinfo.value.dataset == "latin1.json"
