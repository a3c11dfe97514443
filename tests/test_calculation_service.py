"""
Tests for CalculationService: validation, backend calls, history id resolution.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tariffwise.infrastructure.api.client import ApiError
from tariffwise.services.calculation_service import (
    SOURCE_GLOBAL,
    SOURCE_SIMULATOR,
    SOURCE_USER,
    CalculationError,
    CalculationService,
    build_query_params,
    wrap_with_metadata,
)


@pytest.fixture
def form() -> dict:
    return {
        "product": "Rice",
        "exportingFrom": "Thailand",
        "importingTo": "Singapore",
        "quantity": 10.0,
        "customCost": 2.5,
        "calculationDate": "2025-03-01",
        "currency": "SGD",
    }


@pytest.fixture
def client() -> MagicMock:
    c = MagicMock()
    c.calculate.return_value = {
        "success": True,
        "data": {"product": "Rice", "exportingFrom": "Thailand", "importingTo": "Singapore", "totalCost": 26.0},
    }
    c.save_history.return_value = {"id": "hist-42", "createdAt": "2025-03-01T10:00:00Z"}
    return c


def test_build_query_params(form: dict) -> None:
    params = build_query_params(form, SOURCE_USER)
    assert params["quantity"] == "10.0"
    assert params["currency"] == "SGD"
    assert params["mode"] == "user"
    assert "mode" not in build_query_params({**form, "currency": ""})
    assert build_query_params({**form, "currency": ""})["currency"] == "USD"


def test_wrap_with_metadata_generates_id() -> None:
    wrapped = wrap_with_metadata({"product": "Rice"})
    assert wrapped["data"] == {"product": "Rice"}
    assert wrapped["calculationId"].startswith("calc_")
    assert wrapped["calculationDate"]


def test_calculate_uses_saved_history_id(client: MagicMock, form: dict) -> None:
    service = CalculationService(client)

    wrapped = service.calculate(form, SOURCE_GLOBAL)

    assert wrapped["calculationId"] == "hist-42"
    assert wrapped["data"]["calculationDate"] == "2025-03-01T10:00:00Z"
    assert wrapped["data"]["currency"] == "SGD"
    client.save_history.assert_called_once()
    assert client.save_history.call_args.args[1] == SOURCE_GLOBAL


def test_calculate_falls_back_to_latest_history(client: MagicMock, form: dict) -> None:
    client.save_history.side_effect = ApiError("history down", 500)
    client.list_history.return_value = [{"id": "hist-7", "createdAt": "2025-03-02"}, {"id": "hist-6"}]

    wrapped = CalculationService(client).calculate(form)

    assert wrapped["calculationId"] == "hist-7"


def test_calculate_rejects_invalid_form(client: MagicMock, form: dict) -> None:
    with pytest.raises(CalculationError, match="Unit cost must be greater than 0"):
        CalculationService(client).calculate({**form, "customCost": 0})
    client.calculate.assert_not_called()


def test_calculate_surfaces_backend_errors(client: MagicMock, form: dict) -> None:
    client.calculate.return_value = {"success": False, "error": "No tariff found for this route"}
    with pytest.raises(CalculationError, match="No tariff found"):
        CalculationService(client).calculate(form)

    client.calculate.side_effect = ApiError("Server returned 500", 500)
    with pytest.raises(CalculationError, match="Server returned 500"):
        CalculationService(client).calculate(form)


def test_form_options_for_user_source(client: MagicMock) -> None:
    client.list_tariff_definitions.return_value = [
        {"product": "Rice", "exportingFrom": "Thailand", "importingTo": "Singapore"},
        {"product": "Rice", "exportingFrom": "Vietnam", "importingTo": "Singapore"},
    ]

    products, countries = CalculationService(client).load_form_options(SOURCE_USER)

    assert products == ["Rice"]
    assert countries == ["Thailand", "Vietnam", "Singapore"]
    client.list_tariff_definitions.assert_called_once_with("user")


def test_form_options_empty_on_error(client: MagicMock) -> None:
    client.list_products.side_effect = ApiError("down")
    assert CalculationService(client).load_form_options() == ([], [])


def test_save_simulation_assigns_local_id_when_backend_unavailable(client: MagicMock) -> None:
    client.save_history.side_effect = ApiError("down")
    client.list_history.side_effect = ApiError("down")

    result = CalculationService(client).save_simulation({"product": "Oranges"})

    assert result["calculationId"].startswith("local_")
    assert client.save_history.call_args.args[1] == SOURCE_SIMULATOR


def test_save_simulation_uses_saved_id(client: MagicMock) -> None:
    result = CalculationService(client).save_simulation({"product": "Oranges"})
    assert result["calculationId"] == "hist-42"
