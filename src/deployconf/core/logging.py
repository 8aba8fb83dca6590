"""Central logging configuration for deployconf.

Library modules only call :func:`get_logger`; handlers are attached by the CLI
through :func:`setup_logging`. Console output goes to stderr via Rich so that
merged documents printed to stdout stay machine-readable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared stderr Rich Console singleton."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path | str] = None,
) -> Optional[Path]:
    """Configure the ``deployconf`` root logger.

    * A :class:`~rich.logging.RichHandler` at *level* renders messages on
      stderr.
    * If *log_file* is given, a :class:`~logging.FileHandler` writes **all**
      messages (DEBUG and up) to it.

    Returns the resolved log file path, or ``None`` when logging to the
    console only.
    """
    console_handler = RichHandler(
        console=get_console(),
        show_time=False,
        show_path=False,
        markup=False,
        level=level,
    )

    root = logging.getLogger("deployconf")
    root.handlers.clear()
    root.addHandler(console_handler)

    log_path: Optional[Path] = None
    if log_file is not None:
        log_path = Path(log_file).resolve()
        os.makedirs(log_path.parent, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(level)

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``deployconf`` namespace."""
    return logging.getLogger(f"deployconf.{name}")
