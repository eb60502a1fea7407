"""Structured record values and dotted field paths over them."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass
from typing import Final, final

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]
type Record = dict[str, JsonValue]

ID_FIELD: Final[str] = "_id"
NAME_FIELD: Final[str] = "name"
TYPE_FIELD: Final[str] = "type"


@final
class _Missing:
    """Marker for a path that does not resolve inside a record."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(frozen=True, slots=True)
class FieldPath:
    """A parsed dot-separated path such as ``system.description``."""

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("Field path must have at least one segment")
        if any(not segment for segment in self.segments):
            raise ValueError(f"Field path has an empty segment: {self.dotted!r}")

    @classmethod
    def parse(cls, path: str | FieldPath) -> FieldPath:
        if isinstance(path, FieldPath):
            return path
        return cls(tuple(path.strip().split(".")))

    @property
    def dotted(self) -> str:
        return ".".join(self.segments)

    def __str__(self) -> str:
        return self.dotted

    def get(self, record: Mapping[str, JsonValue]) -> JsonValue | _Missing:
        """Return the value at this path, or ``MISSING`` if any segment is absent."""

        current: JsonValue | Mapping[str, JsonValue] = record
        for segment in self.segments:
            if not isinstance(current, Mapping) or segment not in current:
                return MISSING
            current = current[segment]
        return current

    def set(self, record: Record, value: JsonValue) -> None:
        """Store ``value`` at this path, creating intermediate objects as needed."""

        current = record
        for segment in self.segments[:-1]:
            child = current.get(segment)
            if not isinstance(child, dict):
                child = {}
                current[segment] = child
            current = child
        current[self.segments[-1]] = value


def record_identifier(record: Mapping[str, JsonValue]) -> str | None:
    value = record.get(ID_FIELD)
    if value is None or value == "":
        return None
    return str(value)


def record_name(record: Mapping[str, JsonValue]) -> str | None:
    value = record.get(NAME_FIELD)
    return None if value is None else str(value)


def record_type(record: Mapping[str, JsonValue]) -> str | None:
    value = record.get(TYPE_FIELD)
    if value is None or value == "":
        return None
    return str(value)


def describe_record(record: Mapping[str, JsonValue]) -> str:
    """Human label for log lines: the name, else the identifier."""

    return record_name(record) or record_identifier(record) or "<unnamed record>"


def deep_merge(target: Record, changes: Mapping[str, JsonValue]) -> Record:
    """Merge ``changes`` into ``target`` in place; nested objects merge key by key."""

    for key, value in changes.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            deep_merge(existing, value)
        else:
            target[key] = deepcopy(value)
    return target
