"""
Currency options for the calculator and comparison forms.

The backend publishes its exchange table at /tariffs/currencies; when that call
fails the forms fall back to a small static list.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from tariffwise.infrastructure.api.client import ApiError
from tariffwise.utils.logger import get_logger

logger = get_logger()

DEFAULT_CURRENCY = "USD"

_SYMBOLS = {"USD": "$", "SGD": "S$", "EUR": "€", "CNY": "CN¥", "GBP": "£", "JPY": "¥"}


def fallback_currencies(today: date | None = None) -> list[dict[str, Any]]:
    stamp = (today or date.today()).isoformat()
    return [
        {"code": "USD", "name": "United States Dollar", "rate": 1.0, "lastUpdated": stamp},
        {"code": "SGD", "name": "Singapore Dollar", "rate": 1.35, "lastUpdated": stamp},
        {"code": "EUR", "name": "Euro", "rate": 0.93, "lastUpdated": stamp},
        {"code": "CNY", "name": "Chinese Yuan", "rate": 7.12, "lastUpdated": stamp},
    ]


FALLBACK_CURRENCIES = fallback_currencies()


def load_currencies(client: Any) -> list[dict[str, Any]]:
    """Currencies from the backend, or the fallback list when unavailable or empty."""
    try:
        currencies = client.list_currencies()
    except ApiError as e:
        logger.warning("Failed to load currencies from API, using fallback list instead: %s", e)
        return fallback_currencies()
    if not currency_codes(currencies or []):
        logger.warning("Currency list has no usable codes, using fallback list instead")
        return fallback_currencies()
    return currencies


def currency_codes(currencies: list[dict[str, Any]]) -> list[str]:
    """Selectable codes in backend order; entries without a code are skipped."""
    return [c["code"] for c in currencies if c.get("code")]


def resolve_currency(selected: str | None, currencies: list[dict[str, Any]]) -> str:
    """Keep the selected code when it is offered, else the first option."""
    codes = currency_codes(currencies)
    if selected and selected in codes:
        return selected
    return codes[0] if codes else DEFAULT_CURRENCY


def last_updated(code: str | None, currencies: list[dict[str, Any]]) -> str:
    for c in currencies:
        if c.get("code") == code:
            return c.get("lastUpdated") or "N/A"
    return "N/A"


def format_currency(value: float | int | None, code: str | None = None) -> str:
    """
    Format an amount for display.

    >>> format_currency(1234.5, "USD")
    '$1,234.50'
    >>> format_currency(10, "THB")
    'THB 10.00'
    """
    code = (code or DEFAULT_CURRENCY).upper()
    amount = float(value or 0)
    symbol = _SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {amount:,.2f}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
