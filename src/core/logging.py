"""Root logger setup for the bingo backend: always stdout, plus one log file per run when a directory is configured."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_file_path(log_dir: Path | str, started_at: datetime | None = None) -> Path:
    """e.g. logs/dj_bingo_20250601-210000.log"""
    started_at = started_at or datetime.now(tz=UTC)
    return Path(log_dir) / f"dj_bingo_{started_at:%Y%m%d-%H%M%S}.log"


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> Path | None:
    """Replace the root handlers. Returns the log file, if one was opened."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if log_dir is not None:
        log_file = log_file_path(log_dir)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    return log_file
