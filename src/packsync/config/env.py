"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


def optional_env(name: str) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when unset or blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_bool(name: str, default: bool) -> bool:
    value = optional_env(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def env_int(name: str, default: int) -> int:
    value = optional_env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer for {name}: {value!r}") from exc


def env_float(name: str, default: float) -> float:
    value = optional_env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid number for {name}: {value!r}") from exc


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Split a comma-separated variable, dropping blank items."""

    value = optional_env(name)
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())
