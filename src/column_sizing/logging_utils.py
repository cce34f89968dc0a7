"""Logging set-up for the column sizing package, built on loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Route ``column_sizing`` log records to stderr and, optionally, a file.

    The package is silent until this is called; the CLI calls it once at
    start-up.
    """
    logger.remove()
    logger.enable("column_sizing")
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<level>{level: <8}</level> | {message}",
        backtrace=False,
        diagnose=False,
    )
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            rotation="5 MB",
            retention=10,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name} | {message}",
            backtrace=False,
            diagnose=False,
        )
