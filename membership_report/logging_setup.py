"""
Centralised logging configuration for Membership Report.

Every module obtains its logger via ``get_logger(<module name>)``.
The pipeline calls ``configure_logging`` once at startup so that all
downstream loggers share the same handler, format, and level.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "membership_report"

_CONFIGURED = False

LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-36s | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> None:
    """Set up the root logger for the ``membership_report`` namespace.

    Parameters
    ----------
    level:
        Minimum severity to emit.
    log_file:
        If provided, a ``FileHandler`` is added alongside the console handler.
    """
    global _CONFIGURED  # noqa: PLW0603
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if _CONFIGURED:
        # Later pipelines only adjust the level; handlers are installed once
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        return

    root.setLevel(level)
    root.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``membership_report`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
