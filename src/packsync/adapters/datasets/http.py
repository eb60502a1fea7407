"""Fetch datasets over HTTP from a base location."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from packsync.adapters.http_resilience import ResilientClient
from packsync.domain.ports.fetching import DatasetFetchError

if TYPE_CHECKING:
    from collections.abc import Callable

    from packsync.config.http_resilience import ResilienceConfig
    from packsync.config.source import SourceConfig

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def dataset_url(base_url: str, dataset: str) -> str:
    if not base_url or base_url.endswith("/"):
        return f"{base_url}{dataset}"
    return f"{base_url}/{dataset}"


@dataclass(slots=True)
class HttpDatasetFetcher:
    config: SourceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, dataset: str) -> object:
        return asyncio.run(self._fetch_async(dataset))

    async def _fetch_async(self, dataset: str) -> object:
        url = dataset_url(self.config.base_url, dataset)
        log.debug("Requesting %s", url)
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise DatasetFetchError(dataset, f"{status} {exc.response.reason_phrase}") from exc
        except httpx.HTTPError as exc:
            raise DatasetFetchError(dataset, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise DatasetFetchError(dataset, f"response is not valid JSON ({exc})") from exc
