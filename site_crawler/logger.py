"""Logging setup for site_crawler.

Modules log through children of the ``SiteCrawler`` logger::

    logger = get_logger(__name__)   # -> "SiteCrawler.crawler.worker"

Nothing is printed until :func:`configure` attaches output. The CLI does
that once per invocation from its ``--log-*`` options; library users and
tests get plain propagation to the root logger instead.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

LOGGER_NAME: Final[str] = "SiteCrawler"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3


def _build_handlers(log_format: str, log_file: Optional[Union[str, Path]]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Send crawler logs to stdout and, if given, a rotating *log_file*.

    Handlers from an earlier call are closed and replaced.
    """
    root = logging.getLogger(LOGGER_NAME)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(log_format, log_file):
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The ``SiteCrawler`` logger, or its child for a ``site_crawler.*`` module name."""
    root = logging.getLogger(LOGGER_NAME)
    if not name:
        return root
    return root.getChild(name.removeprefix("site_crawler."))


__all__ = ["configure", "get_logger", "DEFAULT_FORMAT", "LOGGER_NAME"]
