"""Process-wide guard allowing a single batch run at a time."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING


class ProcessRunGuard:
    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def held(self) -> bool:
        return self._lock.locked()


PROCESS_RUN_GUARD = ProcessRunGuard()

if TYPE_CHECKING:
    from packsync.domain.ports.locking import RunGuard

    _guard_check: RunGuard = PROCESS_RUN_GUARD
