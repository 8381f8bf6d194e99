# -*- coding: utf-8 -*-
"""
Logging for the scanner.

Everything under the ``ict_trade_agent`` logger goes to stderr and to one file
per day in $ICT_LOG_DIR (default ./log). $ICT_LOG_LEVEL picks the threshold.
Chatty HTTP client loggers are held at WARNING so scan progress stays readable.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "ict_trade_agent"
ROOT_DIR = Path(__file__).resolve().parents[2]
CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d %(message)s"
KEEP_DAYS = 14
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "google_genai")

_log_file: Optional[Path] = None


def log_dir() -> Path:
    return Path(os.getenv("ICT_LOG_DIR") or ROOT_DIR / "log")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv("ICT_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    handler = TimedRotatingFileHandler(path, when="midnight", backupCount=KEEP_DAYS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(level: Union[int, str, None] = None) -> Path:
    """Attach the console and file handlers to the package logger; later calls are no-ops."""

    global _log_file
    if _log_file is not None:
        return _log_file

    directory = log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{PACKAGE_LOGGER}_{date.today():%Y%m%d}.log"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_resolve_level(level))
    package_logger.addHandler(_console_handler())
    package_logger.addHandler(_file_handler(path))
    package_logger.propagate = False

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _log_file = path
    return path


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Module logger nested under the package logger, configuring it on first use."""

    setup_logging()
    if not name or name == "__main__":
        return logging.getLogger(PACKAGE_LOGGER)
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


__all__ = ["get_logger", "setup_logging", "log_dir"]
