"""Calculation breakdown table with the "Add To Export Cart" action."""

from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from tariffwise.domains.currency import format_currency
from tariffwise.infrastructure.api.client import HTTP_BAD_REQUEST, HTTP_NOT_FOUND, ApiError
from tariffwise.ui.session_state import invalidate_downloads
from tariffwise.utils.logger import get_logger

logger = get_logger()


def extract_calculation_data(results: dict[str, Any] | None) -> dict[str, Any] | None:
    if not results:
        return None
    return results.get("data") or results


def cart_error_message(error: ApiError) -> str:
    """Banner text for a failed add-to-cart, keyed off the HTTP status."""
    message = error.message or "Unknown error"
    if error.status_code == HTTP_BAD_REQUEST:
        if "already in cart" in message:
            return "This calculation is already in your export cart"
        return f"Failed to add to cart: {message}"
    if error.status_code == HTTP_NOT_FOUND:
        return "Calculation not found in history. Please calculate again."
    return f"Failed to add to cart: {message}"


def breakdown_frame(data: dict[str, Any]) -> pd.DataFrame:
    currency = data.get("currency") or "USD"
    rows = [
        {
            "Description": item.get("description"),
            "Type": item.get("type"),
            "Rate": item.get("rate"),
            "Amount": format_currency(item.get("amount"), currency),
        }
        for item in data.get("breakdown") or []
    ]
    return pd.DataFrame(rows, columns=["Description", "Type", "Rate", "Amount"])


def add_to_cart(client: Any, results: dict[str, Any] | None) -> tuple[bool, str]:
    """Returns (ok, message) for the banner."""
    data = extract_calculation_data(results)
    if not data:
        return False, "No calculation data available"
    calculation_id = data.get("calculationId") or (results or {}).get("calculationId")
    if not calculation_id:
        return False, "Calculation ID not found. Please calculate again."
    try:
        client.add_to_cart(calculation_id)
    except ApiError as e:
        logger.warning("Error adding %s to cart: %s", calculation_id, e)
        return False, cart_error_message(e)
    return True, "Calculation added to export cart successfully!"


def render_results_table(results: dict[str, Any] | None, client: Any, key: str = "results") -> None:
    data = extract_calculation_data(results)
    if not data or not data.get("breakdown"):
        return

    currency = data.get("currency") or "USD"
    with st.container(border=True):
        header, action = st.columns([3, 1])
        with header:
            st.subheader("Calculation Results")
            st.caption(f"{data.get('exportingFrom')} → {data.get('importingTo')}")
        with action:
            if st.button("Add To Export Cart", key=f"{key}_add_to_cart"):
                ok, message = add_to_cart(client, results)
                if ok:
                    st.success(message)
                    invalidate_downloads()
                    st.session_state.cart_count = client.cart_count()
                else:
                    st.error(message)

        col1, col2, col3 = st.columns(3)
        col1.metric("Product", str(data.get("product") or ""))
        col2.metric("Quantity", f"{data.get('quantity')} x {data.get('unit') or 'unit'}")
        col3.metric("Tariff", str(data.get("tariffType") or ""))

        st.dataframe(breakdown_frame(data), use_container_width=True, hide_index=True)
        st.caption(f"Total Product Cost: {format_currency(data.get('productCost'), currency)}")
        st.metric("Total Cost", format_currency(data.get("totalCost"), currency))
