"""
Tests for logger setup.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tariffwise.utils.logger import NOISY_LOGGERS, get_logger, resolve_level, setup_logger


def test_setup_logger_writes_file_and_is_idempotent(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "app.log"
    log = setup_logger("tariffwise.test_file", level="DEBUG", log_file=log_file)

    again = setup_logger("tariffwise.test_file", level="DEBUG", log_file=log_file)

    assert again is log
    assert len(log.handlers) == 2
    log.info("cart refreshed")
    for handler in log.handlers:
        handler.flush()
    assert "| INFO | tariffwise.test_file | cart refreshed" in log_file.read_text(encoding="utf-8")
    assert get_logger("tariffwise.test_file").level == logging.DEBUG


def test_unknown_level_name_falls_back_to_info() -> None:
    assert resolve_level("VERBOSE") == logging.INFO
    assert resolve_level("") == logging.INFO
    assert resolve_level(None) == logging.INFO
    assert resolve_level(" warning ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR

    log = setup_logger("tariffwise.test_bad_level", level="LOUD")
    assert log.level == logging.INFO


def test_rerun_updates_level_without_adding_handlers() -> None:
    log = setup_logger("tariffwise.test_rerun", level="INFO")
    handlers = list(log.handlers)

    setup_logger("tariffwise.test_rerun", level="DEBUG")

    assert log.level == logging.DEBUG
    assert log.handlers == handlers


def test_http_client_loggers_are_quieted() -> None:
    logging.getLogger("httpx").setLevel(logging.DEBUG)

    setup_logger("tariffwise.test_quiet")

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
