# price_sheet/config/logging_config.py

"""Logging for a single report run.

A run writes everything at DEBUG to ``<work dir>/logs/run_<stamp>.log`` and
echoes ``LOG_LEVEL`` and above (WARNING unless configured) to stderr, so
``--dry-run`` JSON on stdout stays clean. Only the newest
``LOG_RETENTION`` run files are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from price_sheet.config.settings import Settings

LOGGER_NAME = "price_sheet"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def console_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its number.

    Unknown names fall back to WARNING.
    """
    return logging.getLevelNamesMapping().get(
        name.strip().upper(), logging.WARNING
    )


def prune_run_logs(logs_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest *keep* ``run_*.log`` files.

    Run files carry a sortable timestamp, so name order is age order.
    Returns the deleted paths.
    """
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[: max(len(runs) - max(keep, 0), 0)]
    for path in stale:
        path.unlink(missing_ok=True)
    return stale


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def _current_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging() -> Path:
    """Attach the run's handlers to the ``price_sheet`` logger.

    Calling it again in the same process keeps the existing handlers and
    returns the file already in use.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    existing = _current_log_file(logger)
    if existing is not None:
        return existing

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    # Make room for the file this run is about to create.
    removed = prune_run_logs(logs_dir, Settings.LOG_RETENTION - 1)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    logger.addHandler(_file_handler(log_file))
    logger.addHandler(_console_handler(console_level(Settings.LOG_LEVEL)))

    logger.info("Run log: %s", log_file)
    if removed:
        logger.debug("Removed %d old run log(s)", len(removed))
    return log_file
