"""
Logging for the TariffWise dashboard.

Streamlit re-executes app.py on every interaction, so setup runs many times per
process: handlers are attached once, while the level is re-read on each run so a
changed LOG_LEVEL takes effect without a restart.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

APP_LOGGER = "tariffwise"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# supabase talks to its auth server through httpx; its request lines drown the app log at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "urllib3")


def resolve_level(level: int | str | None) -> int:
    """Map a level name or number to a logging level; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or "").strip().upper())
    if isinstance(resolved, int):
        return resolved
    logging.getLogger(APP_LOGGER).warning("Unknown log level %r, using INFO", level)
    return logging.INFO


def quiet_libraries(level: int = logging.WARNING) -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logger(
    name: str = APP_LOGGER,
    level: int | str = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        name: Logger name.
        level: Level number or name such as "DEBUG". Unknown names mean INFO.
        log_file: Optional log file; stderr is always written.

    Returns:
        The configured logger.
    """
    log = logging.getLogger(name)
    log.setLevel(resolve_level(level))
    quiet_libraries()
    if log.handlers:
        return log

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        log.addHandler(handler)
    return log


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    return logging.getLogger(name)
