"""
Logging configuration for the sediment monitoring pipeline.

All components log through module-level loggers obtained from get_logger;
setup_logging wires those to stdout and, optionally, a log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    include_timestamp: bool = True
) -> None:
    """
    Configure the root logger for pipeline runs.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging output
        include_timestamp: Whether to include timestamps in log messages
    """
    if include_timestamp:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    # Repeated CLI runs in one interpreter must not stack handlers
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a pipeline module (pass __name__)."""
    return logging.getLogger(name)
