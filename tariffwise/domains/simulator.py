"""
Client-side tariff simulation.

Custom scenarios are priced locally: product cost is unit cost times quantity,
and the tariff is either a percentage of that cost or a fixed fee per unit.
"""

from __future__ import annotations

import random
import string
import time
from datetime import date
from typing import Any

from tariffwise.domains.validation import parse_number, validate_simulator_form

TARIFF_PERCENTAGE = "percentage"
TARIFF_FIXED = "fixed"
TARIFF_TYPES = (TARIFF_PERCENTAGE, TARIFF_FIXED)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _num(value: float) -> str:
    """Compact number text without exponents: 15.0 -> '15', 0.5 -> '0.5', 1234567.0 -> '1234567'."""
    return format(value, "f").rstrip("0").rstrip(".") or "0"


def generate_local_id(prefix: str = "local") -> str:
    """Fallback id for calculations the backend did not acknowledge."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def tariff_cost(product_cost: float, rate: float, quantity: float, tariff_type: str) -> float:
    if tariff_type == TARIFF_PERCENTAGE:
        return product_cost * rate / 100
    if tariff_type == TARIFF_FIXED:
        return rate * quantity
    raise ValueError(f"Unknown tariff type: {tariff_type}")


def simulate(form: dict[str, Any]) -> dict[str, Any]:
    """
    Price a simulated shipment.

    Raises:
        ValueError: With the user-facing message when the form is invalid.
    """
    error = validate_simulator_form(form)
    if error:
        raise ValueError(error)

    tariff_type = form.get("tariffType") or TARIFF_PERCENTAGE
    quantity = parse_number(form["quantity"])
    unit_cost = parse_number(form["customCost"])
    rate = parse_number(form["tariffRate"])
    unit = str(form.get("unit") or "").strip()
    unit_label = unit or "unit"

    product_cost = unit_cost * quantity
    tariff = tariff_cost(product_cost, rate, quantity, tariff_type)
    total = product_cost + tariff

    if tariff_type == TARIFF_PERCENTAGE:
        rate_text = f"{_num(rate)}%"
        type_label = f"{_num(rate)}% Tariff"
    else:
        rate_text = f"${_num(rate)}/{unit_label}"
        type_label = f"${_num(rate)} Fixed Tariff"

    breakdown = [
        {
            "description": str(form["product"]),
            "type": "Product Cost",
            "rate": f"${unit_cost:.2f}/{unit_label}",
            "amount": product_cost,
        },
        {
            "description": f"Tariff from {form['exportingFrom']} to {form['importingTo']}",
            "type": "Tariff",
            "rate": rate_text,
            "amount": tariff,
        },
    ]

    return {
        "product": form["product"],
        "exportingFrom": form["exportingFrom"],
        "importingTo": form["importingTo"],
        "quantity": quantity,
        "unit": unit,
        "costPerUnit": unit_cost,
        "productCost": product_cost,
        "tariffType": type_label,
        "tariffRate": rate,
        "tariffCost": tariff,
        "totalCost": total,
        "calculationDate": form.get("calculationDate") or date.today().isoformat(),
        "breakdown": breakdown,
        "mode": "simulator",
        "currency": "USD",
    }
