"""Canonical matching keys for pack records.

Two records describe the same logical entity when their display names agree
after normalization and they share a type. The resulting *match key* is only
ever used for lookups and is never persisted.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Final

MATCH_KEY_SEPARATOR: Final[str] = "::"
_WHITESPACE_RUN = re.compile(r"\s+")

type MatchKey = str


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True, slots=True)
class NameNormalizer:
    remove_diacritics: bool = True
    collapse_whitespace: bool = True

    def normalize(self, name: object) -> str:
        """Return the canonical form of ``name``; falsy input yields ``""``."""

        if not name:
            return ""
        text = str(name)
        if self.remove_diacritics:
            text = strip_diacritics(text)
        text = text.lower()
        if self.collapse_whitespace:
            text = _WHITESPACE_RUN.sub(" ", text)
        return text.strip()

    def match_key(self, name: object, type_: str | None, default_type: str) -> MatchKey:
        return f"{self.normalize(name)}{MATCH_KEY_SEPARATOR}{type_ or default_type}"
