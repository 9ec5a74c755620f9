"""
Logging setup.

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only configures the root handler once per process.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    level = logging.getLevelName(settings.log_level())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # asyncpg logs every pool connection at DEBUG; keep it quiet.
    logging.getLogger("asyncpg").setLevel(max(level, logging.INFO))
