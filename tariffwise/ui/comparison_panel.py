"""Compare the landed cost of one product across several importing countries."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from tariffwise.domains.comparison import build_payload, chart_frame, table_rows
from tariffwise.domains.currency import currency_codes, last_updated, load_currencies, resolve_currency
from tariffwise.domains.validation import validate_comparison_form
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.utils.logger import get_logger

logger = get_logger()


def _load_options(client: Any) -> tuple[list[str], list[str]]:
    try:
        return client.list_products(), client.list_countries()
    except ApiError as e:
        logger.error("Failed to load products/countries: %s", e)
        return [], []


def build_comparison_chart(frame: pd.DataFrame, currency: str) -> go.Figure:
    """Stacked product cost + tariff amount per importing country."""
    fig = go.Figure()
    if frame.empty:
        fig.update_layout(title="Landed cost by importing country")
        return fig
    fig.add_trace(go.Bar(x=frame["country"], y=frame["productCost"], name="Product Cost", marker_color="#3b82f6"))
    fig.add_trace(go.Bar(
        x=frame["country"],
        y=frame["tariffAmount"],
        name="Tariff Amount",
        marker_color="#f59e0b",
        customdata=frame["tariffRate"],
        hovertemplate="%{x}<br>Tariff: %{y:,.2f}<br>Rate: %{customdata:.2f} %<extra></extra>",
    ))
    fig.update_layout(
        barmode="stack",
        title="Landed cost by importing country",
        yaxis_title=f"Cost ({currency})",
        legend=dict(orientation="h", y=-0.2),
        margin=dict(l=10, r=10, t=40, b=10),
    )
    return fig


def render_comparison_panel(client: Any) -> None:
    products, countries = _load_options(client)
    currencies = load_currencies(client)
    codes = currency_codes(currencies)
    default_currency = resolve_currency(st.session_state.get("comparison_currency"), currencies)

    with st.container(border=True):
        st.subheader("Multi-Country Tariff Comparison")
        st.caption(
            "Compare total landed costs for the same product across multiple importing countries. "
            "Results include ranked totals and estimated tariff amounts in the selected currency."
        )
        with st.form("comparison_form"):
            col1, col2 = st.columns(2)
            product = col1.selectbox("Product", products, index=None, placeholder="Select a product")
            exporting = col2.selectbox("Exporting Country", countries, index=None, placeholder="Select exporting country")
            importing = st.multiselect("Importing Countries", countries, placeholder="Select one or more countries")

            col3, col4, col5 = st.columns(3)
            quantity = col3.text_input("Quantity", value="1")
            custom_cost = col4.text_input("Custom Unit Cost (optional)", placeholder="Default database cost")
            currency = col5.selectbox(
                "Currency", codes,
                index=codes.index(default_currency) if default_currency in codes else 0,
                format_func=lambda code: f"{code} · {next((c.get('name') for c in currencies if c.get('code') == code), code)}",
            )
            st.caption(f"Last updated: {last_updated(currency, currencies)}")
            submitted = st.form_submit_button("Compare Countries", type="primary")

    if submitted:
        st.session_state.comparison_currency = currency
        form = {
            "product": product or "",
            "exportingFrom": exporting or "",
            "importingToCountries": importing,
            "quantity": quantity,
            "customCost": custom_cost,
            "currency": currency,
        }
        error = validate_comparison_form(form)
        if error:
            st.error(error)
        else:
            st.session_state.comparison_result = None
            try:
                with st.spinner("Computing..."):
                    body = client.compare(build_payload(form))
            except ApiError as e:
                logger.error("Comparison error: %s", e)
                st.error(e.message or "Unable to complete comparison. Please try again.")
            else:
                data = body.get("data") or {}
                data["currency"] = data.get("currency") or currency
                st.session_state.comparison_result = data

    data = st.session_state.get("comparison_result")
    if not data:
        return

    currency_code = data.get("currency") or "USD"
    with st.container(border=True):
        st.subheader("Comparison Results")
        st.caption(
            f"Showing total landed cost in {currency_code} for {data.get('product')} "
            f"exported from {data.get('exportingFrom')}."
        )
        st.dataframe(pd.DataFrame(table_rows(data, currency_code)), use_container_width=True, hide_index=True)
        frame = chart_frame(data)
        if not frame.empty:
            st.plotly_chart(build_comparison_chart(frame, currency_code), use_container_width=True)
