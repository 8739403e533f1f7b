"""Logging configuration for PodSync."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Iterable, Union

from .exceptions import FileSystemError
from .utils import ensure_dir_exists

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# HTTP clients log every feed and mp3 request; the model libraries log download progress
QUIET_LOGGERS = ("urllib3", "requests", "transformers", "huggingface_hub", "filelock")


def resolve_log_level(level: Union[int, str]) -> int:
    """
    Turns a level name such as "debug" into its logging constant.

    Unknown names fall back to INFO; integers pass through unchanged.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: str = "logs",
    log_file: str = "podsync.log",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = 10 * 1024 * 1024, # 10 MB
    backup_count: int = 5,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """
    Routes PodSync logs to stdout and to a rotating file.

    Called twice per run: once before the config is read (so config errors
    are logged) and again with the configured log directory. Each call
    replaces the handlers installed by the previous one.

    Args:
        log_level: Level constant or name ("info", "debug", ...).
        log_dir: Directory for the log file; created if missing.
        log_file: Name of the log file inside `log_dir`.
        log_format: The format string for log messages.
        date_format: The format string for timestamps in logs.
        max_bytes: Maximum size of a log file before rotation.
        backup_count: Number of rotated files to keep.
        quiet_loggers: Third-party loggers capped at WARNING.
    """
    level = resolve_log_level(log_level)
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(level)
    root.addHandler(console)

    log_path = os.path.join(log_dir, log_file)
    try:
        ensure_dir_exists(log_dir)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
    except (FileSystemError, OSError, ValueError) as e:
        # Console logging stays usable when the log directory is not writable
        root.error(f"Failed to set up file logging at {log_path}: {e}")
    else:
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        root.debug(f"Logging to {log_path}")

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
