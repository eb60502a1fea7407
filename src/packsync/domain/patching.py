"""Restricted update payloads built from whitelisted field paths."""

from __future__ import annotations

from copy import deepcopy
from typing import TYPE_CHECKING

from .records import MISSING, FieldPath

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .records import JsonValue, Record


def build_patch(
    source: Mapping[str, JsonValue],
    paths: Iterable[str | FieldPath],
) -> Record:
    """Copy only the given paths of ``source`` into a fresh record.

    Paths that do not resolve in ``source`` are skipped rather than written as
    ``None``, so applying the patch never clears a field the source lacks.
    Values are deep-copied; ``source`` is left untouched.
    """

    patch: Record = {}
    for raw_path in paths:
        path = FieldPath.parse(raw_path)
        value = path.get(source)
        if value is MISSING:
            continue
        path.set(patch, deepcopy(value))
    return patch
