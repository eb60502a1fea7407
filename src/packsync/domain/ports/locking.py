"""Port guarding against concurrent batch runs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RunGuard(Protocol):
    """At most one holder at a time; ``acquire`` never blocks."""

    def acquire(self) -> bool:
        """Return ``True`` if the guard was free and is now held."""
        ...

    def release(self) -> None: ...
