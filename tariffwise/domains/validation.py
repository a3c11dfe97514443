"""
Form validation for the dashboard.

Every validator returns the message to show in the alert banner, or None when
the form is valid. Inputs are the raw strings typed by the user.
"""

from __future__ import annotations

import math
from typing import Any

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
MINIMUM_QUANTITY = 0
MINIMUM_RATE = 0


def parse_number(value: Any) -> float | None:
    """Float value of a form field, or None for blanks and junk."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return None if math.isnan(number) else number


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _missing(form: dict[str, Any], fields: tuple[str, ...]) -> bool:
    return any(_blank(form.get(f)) for f in fields)


def validate_calculation_form(form: dict[str, Any]) -> str | None:
    if _missing(form, ("product", "exportingFrom", "importingTo", "quantity", "customCost")):
        return REQUIRED_FIELDS_MESSAGE
    quantity = parse_number(form.get("quantity"))
    if quantity is None or quantity <= MINIMUM_QUANTITY:
        return "Quantity must be greater than 0"
    cost = parse_number(form.get("customCost"))
    if cost is None or cost <= MINIMUM_QUANTITY:
        return "Unit cost must be greater than 0"
    return None


def validate_simulator_form(form: dict[str, Any]) -> str | None:
    required = ("product", "unit", "exportingFrom", "importingTo", "tariffRate", "quantity", "customCost")
    if _missing(form, required):
        return REQUIRED_FIELDS_MESSAGE
    quantity = parse_number(form.get("quantity"))
    if quantity is None or quantity <= 0:
        return "Quantity must be greater than 0"
    cost = parse_number(form.get("customCost"))
    if cost is None or cost <= 0:
        return "Unit cost must be greater than 0"
    rate = parse_number(form.get("tariffRate"))
    if rate is None:
        return "Tariff rate must be a number"
    if rate < MINIMUM_RATE:
        return "Tariff rate cannot be negative"
    return None


def validate_comparison_form(form: dict[str, Any]) -> str | None:
    if _blank(form.get("product")) or _blank(form.get("exportingFrom")) or not form.get("importingToCountries"):
        return "Please select a product, an exporting country, and at least one importing country."
    quantity = parse_number(form.get("quantity"))
    if quantity is None or quantity <= 0:
        return "Quantity must be greater than 0."
    if not _blank(form.get("customCost")):
        cost = parse_number(form.get("customCost"))
        if cost is None or cost <= 0:
            return "Custom unit cost must be greater than 0."
    return None


def validate_tariff_definition(form: dict[str, Any]) -> tuple[str, str] | None:
    """Returns (title, message) for the alert dialog, or None."""
    required = ("product", "exportingFrom", "importingTo", "type", "rate", "effectiveDate", "expirationDate")
    if _missing(form, required):
        return ("Incomplete Information", "Please fill in all required fields before submitting.")
    rate = parse_number(form.get("rate"))
    if rate is None or rate < MINIMUM_RATE:
        return ("Invalid Rate", "Please enter a valid positive number for the tariff rate.")
    if form.get("exportingFrom") == form.get("importingTo"):
        return ("Invalid Country Pair", "Exporting and importing countries must be different.")
    return None
