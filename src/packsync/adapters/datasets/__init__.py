"""Dataset source adapters."""

from __future__ import annotations

from .files import DirectoryDatasetFetcher
from .http import HttpDatasetFetcher, dataset_url

__all__ = ["DirectoryDatasetFetcher", "HttpDatasetFetcher", "dataset_url"]
