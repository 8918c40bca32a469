# === FILE: rank_tracker/logger.py ===
"""Logging for **rank_tracker**.

Every module logs through the one named logger exported here::

    from rank_tracker.logger import logger
    logger.info("Harvest started")

Output goes to stdout; :func:`init_logging` can add a rotating log file and
is called again by the CLI once the ``--log-*`` options are parsed. Calling
it replaces the previous handlers, so repeated calls never duplicate lines.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "RankTracker"

#: rotation of the optional log file
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3


def _build_handlers(log_file: Optional[Path]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    return handlers


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Reset the project logger: level, stdout handler and optional log file."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()

    formatter = logging.Formatter(log_format)
    for handler in _build_handlers(Path(log_file) if log_file is not None else None):
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    # records must not reach the root logger a second time
    lg.propagate = False
    return lg


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
