"""Logging setup shared by the CLI and long-running consumers of the store."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_dir: Path | str = "logs", log_file_prefix: str = "relief"
) -> logging.Logger:
    """
    Send INFO and above to stdout and to ``<log_dir>/<log_file_prefix>.log``.

    The file rotates at 10MB and keeps 4 backups. Nothing is changed when the
    root logger already has handlers, so repeated calls (or a host application
    that configured logging first) never produce duplicate lines.

    Args:
        log_dir: Directory for the log file, created if missing
        log_file_prefix: Log file name without extension

    Returns:
        Logger for this module
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return logging.getLogger(__name__)

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_dir / f"{log_file_prefix}.log",
        mode="a",
        maxBytes=10 * 1024 * 1024,
        backupCount=4,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)
