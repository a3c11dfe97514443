"""
Tests for config accessors and backend URL building.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from tariffwise.utils import config
from tariffwise.utils.config import get_api_url


@pytest.fixture(autouse=True)
def no_dotenv():
    """Keep a developer's .env out of these tests."""
    with patch("tariffwise.utils.config.load_config"):
        yield


@pytest.mark.parametrize(
    "endpoint, base, expected",
    [
        ("countries", "http://localhost:8080/api", "http://localhost:8080/api/countries"),
        ("/countries", "http://localhost:8080/api/", "http://localhost:8080/api/countries"),
        ("tariff/history", "http://localhost:8080", "http://localhost:8080/api/tariff/history"),
        ("export-cart", "https://tariffs.example.com/", "https://tariffs.example.com/api/export-cart"),
    ],
)
def test_get_api_url(endpoint: str, base: str, expected: str) -> None:
    assert get_api_url(endpoint, base) == expected


def test_api_base_url_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("API_BASE_URL", raising=False)
    assert config.api_base_url() == "http://localhost:8080/api"


def test_required_raises_when_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "   ")
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        config.supabase_url()


def test_request_timeout_parses_and_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "12.5")
    assert config.request_timeout() == 12.5
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "soon")
    assert config.request_timeout() == 30.0


def test_log_level_is_upper_cased(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert config.log_level() == "DEBUG"


def test_log_file_relative_to_project_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("LOG_FILE", raising=False)
    assert config.log_file() is None

    monkeypatch.setenv("LOG_FILE", "logs/app.log")
    assert config.log_file() == config.project_root() / "logs" / "app.log"

    absolute = tmp_path / "app.log"
    monkeypatch.setenv("LOG_FILE", str(absolute))
    assert config.log_file() == absolute
