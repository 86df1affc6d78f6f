"""
Logger configuration.

Installs one timestamped stream handler on the root logger for engine runs.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys
from typing import TextIO

_HANDLER_NAME = "reconciler"


def configure_logging(level: str | int = "INFO", stream: TextIO | None = None) -> None:
    """
    Route log records to a stream with timestamp, logger name and level.

    Calling again replaces the handler from the previous call; handlers
    installed by anything else stay in place.

    Args:
        level: Root log level name or number (usually settings.log_level)
        stream: Destination (defaults to stdout)
    """
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)

    # SQL echo is governed by STATE_STORE_ECHO_SQL, not the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
