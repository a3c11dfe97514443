"""
REST client for the tariff backend.

Wraps every endpoint the dashboard uses. Requests go through one
`requests.Session` so cookies set by the backend persist between calls, and
each request carries the bearer token of the signed-in user.
"""

from __future__ import annotations

import json
from typing import Any, Callable
from urllib.parse import quote

import requests

from tariffwise.utils.config import api_base_url, get_api_url, request_timeout
from tariffwise.utils.logger import get_logger

logger = get_logger()

HTTP_NO_CONTENT = 204
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404

DEFINITION_SCOPES = ("global", "user", "modified")
WRITABLE_SCOPES = ("user", "modified")


class ApiError(RuntimeError):
    """Raised when the backend answers with a non-2xx status or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def parse_error_message(response: requests.Response) -> str:
    """Extract the most useful error text from a failed response."""
    fallback = f"Server returned {response.status_code}"
    text = response.text or ""
    if not text:
        return fallback
    try:
        body = json.loads(text)
    except ValueError:
        return text
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or fallback)
    return text


def _as_list(payload: Any) -> list[Any]:
    return payload if isinstance(payload, list) else []


class TariffApiClient:
    """
    Tariff backend wrapper.

    token_provider is called before every request; it returns the current
    access token or an empty string when nobody is signed in.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_provider: Callable[[], str] | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url or api_base_url()
        self._token_provider = token_provider or (lambda: "")
        self._timeout = timeout if timeout is not None else request_timeout()
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, endpoint: str) -> str:
        return get_api_url(endpoint, self._base_url)

    def _headers(self, json_body: bool = True) -> dict[str, str]:
        token = self._token_provider() or ""
        headers = {"Authorization": f"Bearer {token}" if token else ""}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
        payload: Any = None,
        json_body: bool = True,
    ) -> requests.Response:
        url = self.url(endpoint)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(json_body),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.exception("Backend request failed: %s %s", method, url)
            raise ApiError(f"Could not reach the tariff service: {e}") from e

        if not response.ok:
            message = parse_error_message(response)
            logger.warning("Backend %s %s returned %s: %s", method, url, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)
        return response

    def _json(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        response = self._request(method, endpoint, **kwargs)
        if response.status_code == HTTP_NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Backend %s %s returned invalid JSON", method, endpoint)
            raise ApiError("Invalid response from the tariff service", response.status_code) from e

    # --- Reference data ---

    def list_products(self) -> list[str]:
        return _as_list(self._json("GET", "products"))

    def list_countries(self) -> list[str]:
        return _as_list(self._json("GET", "countries"))

    def list_currencies(self) -> list[dict[str, Any]]:
        payload = self._json("GET", "tariffs/currencies")
        if isinstance(payload, dict):
            return _as_list(payload.get("currency"))
        return []

    # --- Calculations and history ---

    def calculate(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET /tariff. Returns the raw `{success, data, error}` envelope."""
        return self._json("GET", "tariff", params=params) or {}

    def save_history(self, calculation: dict[str, Any], source: str) -> dict[str, Any]:
        """Persist a calculation to the user's session history."""
        body = {
            "calculationData": {
                "success": True,
                "data": {
                    **calculation,
                    "source": source,
                    "currency": calculation.get("currency"),
                },
            },
        }
        return self._json("POST", "tariff/history/save", payload=body) or {}

    def list_history(self) -> list[dict[str, Any]]:
        """Newest first, as returned by the backend."""
        return _as_list(self._json("GET", "tariff/history"))

    def compare(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST /tariffs/compare.

        Raises:
            ApiError: On HTTP failure or when the backend reports success=false.
        """
        body = self._json("POST", "tariffs/compare", payload=payload) or {}
        if not body.get("success"):
            raise ApiError(body.get("error") or "Comparison failed. Please try again.")
        return body

    def tariff_trends(self, params: dict[str, str]) -> list[dict[str, Any]]:
        body = self._json("GET", "tariff-trends", params=params) or {}
        if not body.get("success") or body.get("data") is None:
            raise ApiError(body.get("error") or "Failed to load tariff trends")
        return _as_list(body.get("data"))

    # --- Tariff definitions ---

    def list_tariff_definitions(self, scope: str) -> list[dict[str, Any]]:
        if scope not in DEFINITION_SCOPES:
            raise ValueError(f"Unknown tariff definition scope: {scope}")
        body = self._json("GET", f"tariff-definitions/{scope}") or {}
        if isinstance(body, dict) and body.get("success"):
            return _as_list(body.get("data"))
        return []

    def create_tariff_definition(self, scope: str, payload: dict[str, Any]) -> list[dict[str, Any]]:
        """Returns the created definitions (the backend answers with a `data` list)."""
        self._check_writable(scope)
        body = self._json("POST", f"tariff-definitions/{scope}", payload=payload) or {}
        if not body.get("success") or not body.get("data"):
            raise ApiError(body.get("error") or "Add failed")
        return _as_list(body.get("data"))

    def update_tariff_definition(self, scope: str, tariff_id: str, payload: dict[str, Any]) -> Any:
        self._check_writable(scope)
        return self._json("PUT", f"tariff-definitions/{scope}/{quote(str(tariff_id), safe='')}", payload=payload)

    def delete_tariff_definition(self, scope: str, tariff_id: str) -> None:
        self._check_writable(scope)
        self._request("DELETE", f"tariff-definitions/{scope}/{quote(str(tariff_id), safe='')}")

    def export_tariff_definitions(self) -> bytes:
        return self._request("GET", "tariff-definitions/export", json_body=False).content

    @staticmethod
    def _check_writable(scope: str) -> None:
        if scope not in WRITABLE_SCOPES:
            raise ValueError(f"Tariff definitions in scope '{scope}' are read-only")

    # --- Export cart ---

    def list_cart(self) -> list[dict[str, Any]]:
        return _as_list(self._json("GET", "export-cart"))

    def add_to_cart(self, calculation_id: str) -> None:
        self._request("POST", f"export-cart/add/{quote(str(calculation_id), safe='')}")

    def remove_from_cart(self, calculation_id: str) -> None:
        self._request("DELETE", f"export-cart/remove/{quote(str(calculation_id), safe='')}")

    def clear_cart(self) -> None:
        self._request("DELETE", "export-cart/clear")

    def export_cart_csv(self) -> bytes:
        return self._request("GET", "export-cart/export", json_body=False).content

    def cart_count(self) -> int:
        """Number of items in the export cart. Never raises; failures count as 0."""
        try:
            response = self._session.get(
                self.url("export-cart"),
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Error fetching cart count: %s", e)
            return 0

        if response.status_code == HTTP_NO_CONTENT or not response.ok:
            return 0
        content_type = (response.headers.get("Content-Type") or "").lower()
        if "application/json" not in content_type:
            return 0
        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Error parsing cart data: %s", e)
            return 0
        return len(data) if isinstance(data, list) else 0

    # --- Admin ---

    def dashboard_stats(self) -> dict[str, Any]:
        return self._json("GET", "admin/dashboard/stats") or {}
