"""Tariff simulator: custom scenarios priced locally, then stored in history."""

from __future__ import annotations

from datetime import date
from typing import Any

import streamlit as st

from tariffwise.domains.simulator import TARIFF_FIXED, TARIFF_PERCENTAGE, simulate
from tariffwise.services.calculation_service import CalculationService
from tariffwise.ui.results_table import render_results_table


def render_simulator(service: CalculationService, client: Any) -> None:
    with st.container(border=True):
        st.subheader("Custom Tariff Simulator")
        st.caption("Enter custom tariff parameters and calculate import costs in real-time.")

        tariff_type = st.radio(
            "Tariff Type *",
            (TARIFF_PERCENTAGE, TARIFF_FIXED),
            format_func=lambda t: "Percentage (%)" if t == TARIFF_PERCENTAGE else "Fixed ($ per unit)",
            horizontal=True,
            key="sim_tariff_type",
        )
        with st.form("simulator_form"):
            col1, col2 = st.columns(2)
            product = col1.text_input("Product *", placeholder="e.g., Oranges, Rice, Electronics")
            unit = col2.text_input("Unit *", placeholder="e.g., kg, lbs, units")

            col3, col4 = st.columns(2)
            exporting = col3.text_input("Exporting From *", placeholder="e.g., Thailand, Vietnam")
            importing = col4.text_input("Importing To *", placeholder="e.g., Philippines, Singapore")

            col5, col6 = st.columns(2)
            rate_label = "Tariff Rate * (%)" if tariff_type == TARIFF_PERCENTAGE else "Tariff Rate * ($ per unit)"
            tariff_rate = col5.text_input(
                rate_label, placeholder="e.g., 15" if tariff_type == TARIFF_PERCENTAGE else "e.g., 0.50",
            )
            quantity = col6.text_input(f"Quantity * {f'({unit})' if unit else ''}", value="1")

            col7, col8 = st.columns(2)
            custom_cost = col7.text_input("Cost per Unit * ($)", placeholder="e.g., 2.50")
            calc_date = col8.date_input("Calculation Date", value=date.today())
            submitted = st.form_submit_button("Calculate Import Cost", type="primary", use_container_width=True)

    if submitted:
        form = {
            "product": product.strip(),
            "unit": unit.strip(),
            "exportingFrom": exporting.strip(),
            "importingTo": importing.strip(),
            "tariffType": tariff_type,
            "tariffRate": tariff_rate,
            "quantity": quantity,
            "customCost": custom_cost,
            "calculationDate": calc_date.isoformat() if calc_date else "",
        }
        try:
            result = simulate(form)
        except ValueError as e:
            st.error(str(e))
        else:
            with st.spinner("Saving to history..."):
                st.session_state.simulator_result = service.save_simulation(result)

    if st.session_state.get("simulator_result"):
        render_results_table(st.session_state.simulator_result, client, key="simulator")
