"""Async HTTP client with retries, rate limiting and optional caching."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from packsync.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=("GET", "HEAD"),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


def build_cache_storage(config: CacheConfig) -> AsyncSqliteStorage | None:
    if not config.enabled:
        return None
    if config.backend not in {"sqlite", "memory"}:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)
    if config.backend == "sqlite" and config.sqlite_path is None:
        msg = "The sqlite cache backend needs a sqlite_path"
        raise ValueError(msg)
    database_path = config.sqlite_path if config.backend == "sqlite" else ":memory:"
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
    )


class ResilientClient:
    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        transport = RetryTransport(retry=build_retry(config.retry))
        headers = dict(config.default_headers) if config.default_headers else None
        base_url = config.base_url or ""

        storage = build_cache_storage(config.cache)
        if storage is not None:
            self._client: httpx.AsyncClient = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                transport=transport,
                headers=headers,
                storage=storage,
            )
        else:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                transport=transport,
                headers=headers,
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str) -> httpx.Response:
        if self._limiter is None:
            return await self._client.get(url)
        async with self._limiter:
            return await self._client.get(url)
