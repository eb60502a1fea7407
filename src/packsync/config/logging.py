"""Root logger setup for the command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# per-request INFO lines from the HTTP stack drown out batch progress
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger once; ``force=True`` replaces existing handlers."""

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
