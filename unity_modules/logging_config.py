"""Logging setup for the unity-modules CLI."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_ENV_VAR = "UNITY_MODULES_LOG"

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _resolve_log_level(debug_flag: bool) -> int:
    """Resolve log level: --debug > UNITY_MODULES_LOG > WARNING."""
    if debug_flag:
        return logging.DEBUG
    env_value = os.environ.get(LOG_ENV_VAR, "").strip().upper()
    if env_value in _VALID_LOG_LEVELS:
        level: int = getattr(logging, env_value)
        return level
    return logging.WARNING


def setup_logging(level: int, log_file: Path | None = None) -> None:
    """Configure the root logger.

    Logs go to stderr; with log_file, also to a rotating file. If the
    log directory cannot be created, stderr is used alone.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    log_file,
                    maxBytes=LOG_MAX_BYTES,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                    delay=True,
                )
            )
        except OSError as e:
            sys.stderr.write(f"Cannot open log file {log_file}: {e}\n")

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
