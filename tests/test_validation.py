"""
Tests for form validators.
"""

from __future__ import annotations

import pytest

from tariffwise.domains.validation import (
    REQUIRED_FIELDS_MESSAGE,
    parse_number,
    validate_calculation_form,
    validate_comparison_form,
    validate_simulator_form,
    validate_tariff_definition,
)


@pytest.fixture
def calc_form() -> dict:
    return {
        "product": "Rice",
        "exportingFrom": "Thailand",
        "importingTo": "Singapore",
        "quantity": "10",
        "customCost": "2.5",
    }


@pytest.mark.parametrize(
    "value, expected",
    [("3.5", 3.5), (4, 4.0), ("  ", None), ("abc", None), (None, None), (True, None), ("nan", None)],
)
def test_parse_number(value, expected) -> None:
    assert parse_number(value) == expected


def test_calculation_form_valid(calc_form: dict) -> None:
    assert validate_calculation_form(calc_form) is None


def test_calculation_form_missing_field(calc_form: dict) -> None:
    calc_form["importingTo"] = ""
    assert validate_calculation_form(calc_form) == REQUIRED_FIELDS_MESSAGE


def test_calculation_form_rejects_zero_quantity_and_cost(calc_form: dict) -> None:
    assert validate_calculation_form({**calc_form, "quantity": "0"}) == "Quantity must be greater than 0"
    assert validate_calculation_form({**calc_form, "customCost": "-1"}) == "Unit cost must be greater than 0"


def test_simulator_form_rate_checks(calc_form: dict) -> None:
    form = {**calc_form, "unit": "kg", "tariffRate": "15"}
    assert validate_simulator_form(form) is None
    assert validate_simulator_form({**form, "tariffRate": "lots"}) == "Tariff rate must be a number"
    assert validate_simulator_form({**form, "tariffRate": "-2"}) == "Tariff rate cannot be negative"
    assert validate_simulator_form({**form, "unit": ""}) == REQUIRED_FIELDS_MESSAGE


def test_comparison_form() -> None:
    form = {
        "product": "Rice",
        "exportingFrom": "Thailand",
        "importingToCountries": ["Singapore", "China"],
        "quantity": "5",
        "customCost": "",
    }
    assert validate_comparison_form(form) is None
    assert validate_comparison_form({**form, "importingToCountries": []}).startswith("Please select a product")
    assert validate_comparison_form({**form, "quantity": "0"}) == "Quantity must be greater than 0."
    assert validate_comparison_form({**form, "customCost": "0"}) == "Custom unit cost must be greater than 0."


def test_tariff_definition_checks() -> None:
    form = {
        "product": "Rice",
        "exportingFrom": "Thailand",
        "importingTo": "Singapore",
        "type": "AHS",
        "rate": "5.25",
        "effectiveDate": "2024-01-01",
        "expirationDate": "Ongoing",
    }
    assert validate_tariff_definition(form) is None
    assert validate_tariff_definition({**form, "expirationDate": ""})[0] == "Incomplete Information"
    assert validate_tariff_definition({**form, "rate": "-1"})[0] == "Invalid Rate"
    assert validate_tariff_definition({**form, "importingTo": "Thailand"}) == (
        "Invalid Country Pair",
        "Exporting and importing countries must be different.",
    )
