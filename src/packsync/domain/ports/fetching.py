"""Ports for retrieving source datasets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class DatasetFetchError(RuntimeError):
    """Raised when a dataset cannot be retrieved or decoded."""

    def __init__(self, dataset: str, reason: str) -> None:
        super().__init__(f"Could not fetch {dataset}: {reason}")
        self.dataset = dataset
        self.reason = reason


@runtime_checkable
class DatasetFetcher(Protocol):
    """Callable port returning the decoded JSON content of a named dataset."""

    def __call__(self, dataset: str) -> object: ...


__all__ = ["DatasetFetchError", "DatasetFetcher"]
