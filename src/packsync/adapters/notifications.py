"""Notifier implementations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

NOTIFICATION_LOGGER = "packsync.notifications"


@dataclass(slots=True)
class LoggingNotifier:
    """Send notifications to a dedicated logger; silent when disabled."""

    enabled: bool = True
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(NOTIFICATION_LOGGER))

    def info(self, message: str) -> None:
        if self.enabled:
            self.logger.info(message)

    def warn(self, message: str) -> None:
        if self.enabled:
            self.logger.warning(message)

    def error(self, message: str) -> None:
        if self.enabled:
            self.logger.error(message)


if TYPE_CHECKING:
    from packsync.domain.ports.notifications import Notifier

    _notifier_check: Notifier = LoggingNotifier()
