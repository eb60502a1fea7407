from __future__ import annotations

import pytest

from packsync.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DATASETS,
    ConfigurationError,
    SyncConfig,
    get_sync_config,
)

_SYNC_VARS = (
    "PACKSYNC_BASE_URL",
    "PACKSYNC_DATASETS",
    "PACKSYNC_MATCH_BY_NAME",
    "PACKSYNC_REMOVE_DIACRITICS",
    "PACKSYNC_COLLAPSE_WHITESPACE",
    "PACKSYNC_PATCH_ONLY",
    "PACKSYNC_PATCH_PATHS",
    "PACKSYNC_CHUNK_SIZE",
    "PACKSYNC_UNLOCK_IF_LOCKED",
    "PACKSYNC_PAUSE_SECONDS",
    "PACKSYNC_SHOW_NOTIFICATIONS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SYNC_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_the_original_batch() -> None:
    config = get_sync_config()

    assert config.base_url == DEFAULT_BASE_URL
    assert config.datasets == DEFAULT_DATASETS
    assert len(config.datasets) == 17
    assert config.name_matching.enabled
    assert config.name_matching.remove_diacritics
    assert config.name_matching.collapse_whitespace
    assert config.patch_only
    assert config.patch_paths == ("system.description",)
    assert config.chunk_size == DEFAULT_CHUNK_SIZE == 25
    assert config.unlock_if_locked
    assert config.pause_seconds == pytest.approx(0.3)
    assert config.show_notifications


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKSYNC_BASE_URL", "https://mirror.test/")
    monkeypatch.setenv("PACKSYNC_DATASETS", "a.json, b.json,,")
    monkeypatch.setenv("PACKSYNC_MATCH_BY_NAME", "no")
    monkeypatch.setenv("PACKSYNC_REMOVE_DIACRITICS", "false")
    monkeypatch.setenv("PACKSYNC_PATCH_ONLY", "0")
    monkeypatch.setenv("PACKSYNC_PATCH_PATHS", "system.description,img")
    monkeypatch.setenv("PACKSYNC_CHUNK_SIZE", "10")
    monkeypatch.setenv("PACKSYNC_PAUSE_SECONDS", "0")
    monkeypatch.setenv("PACKSYNC_SHOW_NOTIFICATIONS", "off")

    config = get_sync_config()

    assert config.base_url == "https://mirror.test/"
    assert config.datasets == ("a.json", "b.json")
    assert not config.name_matching.enabled
    assert not config.name_matching.remove_diacritics
    assert config.name_matching.collapse_whitespace
    assert not config.patch_only
    assert config.patch_paths == ("system.description", "img")
    assert config.chunk_size == 10
    assert config.pause_seconds == 0
    assert not config.show_notifications


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PACKSYNC_MATCH_BY_NAME", "maybe"),
        ("PACKSYNC_CHUNK_SIZE", "many"),
        ("PACKSYNC_CHUNK_SIZE", "0"),
        ("PACKSYNC_PAUSE_SECONDS", "-1"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_sync_config()


def test_with_overrides_ignores_none_and_validates() -> None:
    config = SyncConfig()

    updated = config.with_overrides(chunk_size=5, base_url=None)

    assert updated.chunk_size == 5
    assert updated.base_url == config.base_url
    with pytest.raises(ConfigurationError, match="Invalid patch path"):
        config.with_overrides(patch_paths=("system.description", " "))


@pytest.mark.parametrize("path", ["system..description", ".img", "system."])
def test_malformed_patch_paths_raise(path: str) -> None:
    with pytest.raises(ConfigurationError, match="empty segment"):
        SyncConfig(patch_paths=(path,))
