"""Shared fixtures: canned backend responses and a mocked HTTP session."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from tariffwise.infrastructure.api.client import TariffApiClient


def make_response(
    status: int = 200,
    body: Any = None,
    content_type: str = "application/json",
    raw: bytes | None = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    response.url = "http://backend.test/api/"
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session: MagicMock) -> TariffApiClient:
    return TariffApiClient(
        base_url="http://backend.test",
        token_provider=lambda: "tok-123",
        timeout=5,
        session=session,
    )


class SessionState(dict):
    """Dict with attribute access, standing in for st.session_state."""

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value


def _column() -> MagicMock:
    column = MagicMock()
    column.button.return_value = False
    return column


@pytest.fixture
def fake_st() -> MagicMock:
    """A mocked streamlit module whose widgets are unclicked unless a test says otherwise."""
    st = MagicMock()
    st.session_state = SessionState(flash=None, pending_confirmation=None, downloads={}, cart_count=0)
    st.button.return_value = False
    st.columns.side_effect = lambda spec: tuple(_column() for _ in range(spec if isinstance(spec, int) else len(spec)))
    return st
