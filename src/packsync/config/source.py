"""Dataset source configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

DATASET_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "packsync"


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Where datasets are fetched from and how the HTTP client behaves."""

    base_url: str
    resilience: ResilienceConfig


def get_source_config(base_url: str) -> SourceConfig:
    cache = CacheConfig(enabled=False)
    if env_bool("PACKSYNC_HTTP_CACHE", default=False):
        cache = CacheConfig(
            enabled=True,
            backend="sqlite",
            sqlite_path=str(get_storage_config().http_cache_path()),
        )

    return SourceConfig(
        base_url=base_url,
        resilience=ResilienceConfig(
            name="datasets",
            timeout_seconds=env_float("PACKSYNC_HTTP_TIMEOUT", DATASET_TIMEOUT_SECONDS),
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
            cache=cache,
            default_headers={"User-Agent": DEFAULT_USER_AGENT},
        ),
    )
