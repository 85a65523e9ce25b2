# src/config/logging_config.py

"""Per-run timestamped logging configuration for food_finder.

Every process start (HTTP server, CLI search, TUI) gets its own log file
inside ``logs/`` named after the launch time, e.g.
``logs/run_20260214_153045.log``.  All ``food_finder.*`` loggers share
that file so a single search can be followed from the HTTP route through
the orchestrator down to each platform adapter.

The console only shows warnings unless ``LOG_LEVEL`` overrides it, which
keeps uvicorn's access log readable.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "food_finder"


def _console_level() -> int:
    """Resolve the console level from ``LOG_LEVEL`` (default WARNING)."""
    name = os.getenv("LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Initialise the ``food_finder`` logger for the current run.

    Args:
        logs_dir: Directory for the run log.  Defaults to
            :attr:`Settings.LOGS_DIR`.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, app reloads) keep the first handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # curl_cffi and asyncio chatter drowns the per-search trail
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
