"""
Logging setup for hosts embedding the engine.

pawjournal modules only ever call ``loguru.logger``; nothing is configured
at import time.  A host calls ``setup_logging_from_config(config)`` once at
startup to get a stderr sink and, when ``logging.file`` is set, a rotating
file that receives pawjournal's own records only.
"""

import os
import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = "<level>[{level.name}]</level> <cyan>{name}</cyan> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"


def _from_pawjournal(record: dict) -> bool:
    return record["name"].startswith("pawjournal")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Replace loguru's sinks with stderr plus an optional engine log file.

    Args:
        level: Minimum level for both sinks.
        log_file: Rotating file for pawjournal records. Host records are
            not written there.
        rotation: Size or interval at which the file rotates.
        retention: How long rotated files are kept.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        logger.add(
            log_file,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            filter=_from_pawjournal,
        )


def resolve_log_file(config: Any) -> str | None:
    """``logging.file`` as a path; relative names live under ``paths.log_dir``."""
    name = config.get("logging.file") or ""
    if not name:
        return None
    name = os.path.expanduser(name)
    if os.path.isabs(name):
        return name
    return os.path.join(os.path.expanduser(config.get("paths.log_dir", ".")), name)


def setup_logging_from_config(config: Any) -> None:
    """Configure logging from the ``logging`` section of a Config."""
    setup_logging(
        level=str(config.get("logging.level", "WARNING")).upper(),
        log_file=resolve_log_file(config),
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "7 days"),
    )
