"""Tariff calculator form for global or user-defined tariffs."""

from __future__ import annotations

from datetime import date
from typing import Any

import streamlit as st

from tariffwise.domains.currency import currency_codes, last_updated, load_currencies, resolve_currency
from tariffwise.services.calculation_service import SOURCE_GLOBAL, CalculationError, CalculationService

MINIMUM_QUANTITY = 0.0
QUANTITY_STEP = 0.01


def render_calculator_form(service: CalculationService, client: Any, source: str = SOURCE_GLOBAL) -> dict | None:
    """Render the form; returns the wrapped result when a calculation succeeds."""
    is_global = source == SOURCE_GLOBAL
    products, countries = service.load_form_options(source)
    currencies = load_currencies(client)
    codes = currency_codes(currencies)
    default_currency = resolve_currency(st.session_state.get(f"calc_currency_{source}"), currencies)

    with st.container(border=True):
        st.subheader("Global Tariff Calculator" if is_global else "Simulator Calculator")
        st.caption(
            "Calculate costs using official global tariffs." if is_global
            else "Calculate costs using your simulated tariffs."
        )
        with st.form(f"calculator_form_{source}"):
            col1, col2, col3 = st.columns(3)
            product = col1.selectbox("Product *", products, index=None, placeholder="Select product")
            quantity = col2.number_input("Quantity *", min_value=MINIMUM_QUANTITY, value=1.0, step=QUANTITY_STEP)
            calc_date = col3.date_input("Calculation Date", value=date.today())

            col4, col5 = st.columns(2)
            exporting = col4.selectbox("Exporting From *", countries, index=None, placeholder="Select country")
            importing = col5.selectbox("Importing To *", countries, index=None, placeholder="Select country")

            col6, col7 = st.columns(2)
            custom_cost = col6.number_input(
                "Cost per Unit *", min_value=MINIMUM_QUANTITY, value=None, step=QUANTITY_STEP,
                placeholder="Enter cost per unit",
            )
            currency = col7.selectbox(
                "Currency", codes, index=codes.index(default_currency) if default_currency in codes else 0,
            )
            st.caption(f"Currency latest update: {last_updated(currency, currencies)}")
            submitted = st.form_submit_button("Calculate Cost", type="primary", use_container_width=True)

    if not submitted:
        return None

    st.session_state[f"calc_currency_{source}"] = currency
    form = {
        "product": product or "",
        "exportingFrom": exporting or "",
        "importingTo": importing or "",
        "quantity": quantity,
        "customCost": custom_cost,
        "calculationDate": calc_date.isoformat() if calc_date else "",
        "currency": currency,
    }
    try:
        with st.spinner("Calculating..."):
            return service.calculate(form, source)
    except CalculationError as e:
        st.error(str(e))
        return None
