"""
Tariff calculation against the backend, with history persistence.

A calculation is only useful for the export cart once the backend has stored it
in the session history, because the cart refers to history ids.
"""

from __future__ import annotations

import random
import string
import time
from datetime import datetime, timezone
from typing import Any

from tariffwise.domains.definitions import unique_countries, unique_products
from tariffwise.domains.simulator import generate_local_id
from tariffwise.domains.validation import validate_calculation_form
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.utils.logger import get_logger

logger = get_logger()

SOURCE_GLOBAL = "global"
SOURCE_USER = "user"
SOURCE_SIMULATOR = "simulator"


class CalculationError(RuntimeError):
    """Raised when a calculation cannot be produced; the message is user-facing."""


def generate_calculation_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"calc_{int(time.time() * 1000)}_{suffix}"


def wrap_with_metadata(results: dict[str, Any]) -> dict[str, Any]:
    """Envelope used by the results table: {data, calculationId, calculationDate}."""
    return {
        "data": results,
        "calculationId": results.get("calculationId") or generate_calculation_id(),
        "calculationDate": results.get("calculationDate") or datetime.now(timezone.utc).isoformat(),
    }


def build_query_params(form: dict[str, Any], source: str = SOURCE_GLOBAL) -> dict[str, str]:
    params = {
        "product": str(form["product"]),
        "exportingFrom": str(form["exportingFrom"]),
        "importingTo": str(form["importingTo"]),
        "quantity": str(form["quantity"]),
        "customCost": str(form["customCost"]),
        "currency": str(form.get("currency") or "USD"),
    }
    if source == SOURCE_USER:
        params["mode"] = "user"
    return params


class CalculationService:
    def __init__(self, client: Any) -> None:
        self._client = client

    def load_form_options(self, source: str = SOURCE_GLOBAL) -> tuple[list[str], list[str]]:
        """(products, countries) for the calculator dropdowns. Empty lists on failure."""
        try:
            if source == SOURCE_GLOBAL:
                return self._client.list_products(), self._client.list_countries()
            tariffs = self._client.list_tariff_definitions(SOURCE_USER)
            return unique_products(tariffs), unique_countries(tariffs)
        except ApiError as e:
            logger.error("Error loading initial data: %s", e)
            return [], []

    def calculate(self, form: dict[str, Any], source: str = SOURCE_GLOBAL) -> dict[str, Any]:
        """
        Run a backend calculation and store it in history.

        Returns:
            The wrapped result (see wrap_with_metadata).

        Raises:
            CalculationError: On invalid input or when the backend refuses.
        """
        error = validate_calculation_form(form)
        if error:
            raise CalculationError(error)

        try:
            result = self._client.calculate(build_query_params(form, source))
        except ApiError as e:
            raise CalculationError(e.message or "Calculation failed") from e

        if not result.get("success") or not result.get("data"):
            raise CalculationError(result.get("error") or "Calculation failed")

        data = dict(result["data"])
        data["currency"] = data.get("currency") or form.get("currency") or "USD"

        saved = self._save(data, source)
        if saved:
            data["calculationId"] = saved.get("id") or saved.get("calculationId") or data.get("calculationId")
            data["calculationDate"] = saved.get("createdAt") or saved.get("calculationDate") or data.get("calculationDate")
        else:
            latest = self._latest_history_entry()
            if latest:
                data["calculationId"] = latest.get("id")
                data["calculationDate"] = latest.get("createdAt")

        logger.info(
            "Calculated %s %s -> %s (id=%s)",
            data.get("product"), data.get("exportingFrom"), data.get("importingTo"), data.get("calculationId"),
        )
        return wrap_with_metadata(data)

    def save_simulation(self, result: dict[str, Any]) -> dict[str, Any]:
        """Persist a simulator result and attach an id so it can go to the cart."""
        result = dict(result)
        saved = self._save(result, SOURCE_SIMULATOR)
        calculation_id = None
        if saved:
            calculation_id = saved.get("id") or saved.get("calculationId")
        else:
            latest = self._latest_history_entry()
            if latest:
                calculation_id = latest.get("id") or latest.get("calculationId")
        result["calculationId"] = calculation_id or generate_local_id()
        logger.info("Simulation stored with id %s", result["calculationId"])
        return result

    def _save(self, calculation: dict[str, Any], source: str) -> dict[str, Any] | None:
        try:
            return self._client.save_history(calculation, source) or None
        except ApiError as e:
            logger.error("Failed to save calculation to history: %s %s", e.status_code, e)
            return None

    def _latest_history_entry(self) -> dict[str, Any] | None:
        try:
            history = self._client.list_history()
        except ApiError as e:
            logger.warning("Could not fetch calculation ID from history: %s", e)
            return None
        return history[0] if history else None
