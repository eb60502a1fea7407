"""Batch upsert defaults and the environment-driven sync configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Final

from packsync.domain.records import FieldPath

from .env import env_bool, env_float, env_int, env_list, optional_env
from .errors import ConfigurationError

DEFAULT_BASE_URL: Final[str] = (
    "https://raw.githubusercontent.com/JackBinary/potential-rotary-phone/refs/heads/main/"
)
DEFAULT_DATASETS: Final[tuple[str, ...]] = (
    "l5r5e.core-bonds_Bonds.json",
    "l5r5e.core-peculiarities-adversities_Adversities.json",
    "l5r5e.core-peculiarities-anxieties_Anxieties.json",
    "l5r5e.core-peculiarities-distinctions_Distinctions.json",
    "l5r5e.core-peculiarities-passions_Passions.json",
    "l5r5e.core-techniques-inversions_Techniques_Inversions.json",
    "l5r5e.core-techniques-invocations_Techniques_Invocations.json",
    "l5r5e.core-techniques-kata_Techniques_Kata.json",
    "l5r5e.core-techniques-kiho_Techniques_Kih_.json",
    "l5r5e.core-techniques-maho_Techniques_Mah_.json",
    "l5r5e.core-techniques-mantra_Techniques_Mantra.json",
    "l5r5e.core-techniques-mastery_Mastery_Abilities.json",
    "l5r5e.core-techniques-ninjutsu_Techniques_Ninjutsu.json",
    "l5r5e.core-techniques-rituals_Techniques_Rituals.json",
    "l5r5e.core-techniques-school_School_Abilities.json",
    "l5r5e.core-techniques-shuji_Techniques_Shuji.json",
    "l5r5e.core-titles_Titles.json",
)
DEFAULT_PATCH_PATHS: Final[tuple[str, ...]] = ("system.description",)
DEFAULT_CHUNK_SIZE: Final[int] = 25
DEFAULT_PAUSE_SECONDS: Final[float] = 0.3


@dataclass(frozen=True, slots=True)
class NameMatchingConfig:
    enabled: bool = True
    remove_diacritics: bool = True
    collapse_whitespace: bool = True


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Options recognised by a batch upsert run."""

    base_url: str = DEFAULT_BASE_URL
    datasets: tuple[str, ...] = DEFAULT_DATASETS
    name_matching: NameMatchingConfig = field(default_factory=NameMatchingConfig)
    patch_only: bool = True
    patch_paths: tuple[str, ...] = DEFAULT_PATCH_PATHS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    unlock_if_locked: bool = True
    pause_seconds: float = DEFAULT_PAUSE_SECONDS
    show_notifications: bool = True

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ConfigurationError(f"Chunk size must be positive, got {self.chunk_size}")
        if self.pause_seconds < 0:
            raise ConfigurationError(
                f"Pause between datasets must be non-negative, got {self.pause_seconds}"
            )
        for path in self.patch_paths:
            try:
                FieldPath.parse(path)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid patch path {path!r}: {exc}") from exc

    def with_overrides(self, **overrides: object) -> SyncConfig:
        """Return a copy with every override that is not ``None`` applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)  # pyright: ignore[reportArgumentType]


def get_sync_config() -> SyncConfig:
    name_matching = NameMatchingConfig(
        enabled=env_bool("PACKSYNC_MATCH_BY_NAME", default=True),
        remove_diacritics=env_bool("PACKSYNC_REMOVE_DIACRITICS", default=True),
        collapse_whitespace=env_bool("PACKSYNC_COLLAPSE_WHITESPACE", default=True),
    )
    return SyncConfig(
        base_url=optional_env("PACKSYNC_BASE_URL") or DEFAULT_BASE_URL,
        datasets=env_list("PACKSYNC_DATASETS", DEFAULT_DATASETS),
        name_matching=name_matching,
        patch_only=env_bool("PACKSYNC_PATCH_ONLY", default=True),
        patch_paths=env_list("PACKSYNC_PATCH_PATHS", DEFAULT_PATCH_PATHS),
        chunk_size=env_int("PACKSYNC_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
        unlock_if_locked=env_bool("PACKSYNC_UNLOCK_IF_LOCKED", default=True),
        pause_seconds=env_float("PACKSYNC_PAUSE_SECONDS", DEFAULT_PAUSE_SECONDS),
        show_notifications=env_bool("PACKSYNC_SHOW_NOTIFICATIONS", default=True),
    )
