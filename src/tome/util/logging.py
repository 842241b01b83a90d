"""Logging helpers for tome.

Handlers hang off the ``tome`` package logger, so embedding applications keep
control of the root logger. Records still propagate to it.
"""

from __future__ import annotations

import logging
from pathlib import Path

PACKAGE_LOGGER = "tome"

_CONSOLE_HANDLER = "tome-console"
_FILE_HANDLER = "tome-file"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
}


def configure_logging(verbosity: str = "info", log_file: Path | None = None) -> logging.Logger:
    """Attach console and optional file handlers to the tome logger.

    Calling it again adjusts the console level and adds the file handler if
    one is not attached yet; handlers are never duplicated.

    Args:
        verbosity: Console level (error, warning, info, verbose, debug). Unknown values mean info.
        log_file: Optional path for a debug-level log file.

    Returns:
        logging.Logger: The tome package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)

    console = _handler(package_logger, _CONSOLE_HANDLER)
    if console is None:
        console = logging.StreamHandler()
        console.set_name(_CONSOLE_HANDLER)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        package_logger.addHandler(console)
    console.setLevel(_LEVELS.get(verbosity.lower(), logging.INFO))

    if log_file is not None and _handler(package_logger, _FILE_HANDLER) is None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        package_logger.addHandler(file_handler)

    # httpx logs every account request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name*, configuring the tome logger on first use."""
    if _handler(logging.getLogger(PACKAGE_LOGGER), _CONSOLE_HANDLER) is None:
        configure_logging()
    return logging.getLogger(name)


def _handler(logger: logging.Logger, name: str) -> logging.Handler | None:
    return next((handler for handler in logger.handlers if handler.get_name() == name), None)
