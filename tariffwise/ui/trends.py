"""Historical tariff trend lines."""

from __future__ import annotations

from datetime import date
from typing import Any

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from tariffwise.domains.trends import (
    MAX_LINES,
    build_params,
    color_map,
    count_lines,
    default_filters,
    format_series,
    series_frame,
    validate_filters,
)
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.utils.logger import get_logger

logger = get_logger()


def build_trend_chart(series: list[dict[str, Any]]) -> go.Figure:
    frame = series_frame(series)
    if frame.empty:
        fig = go.Figure()
        fig.update_layout(title="Tariff rate over time")
        return fig
    fig = px.line(
        frame,
        x="date",
        y="tariffRate",
        color="series",
        color_discrete_map=color_map(series),
        markers=True,
        labels={"tariffRate": "Tariff Rate (%)", "date": "Date", "series": "Import-Export-Product"},
        title="Tariff rate over time",
    )
    fig.update_layout(legend=dict(orientation="h", y=-0.25), margin=dict(l=10, r=10, t=40, b=10))
    return fig


def render_trends(client: Any) -> None:
    try:
        countries, products = client.list_countries(), client.list_products()
    except ApiError as e:
        logger.error("Error loading filter options: %s", e)
        countries, products = [], []

    filters = st.session_state.get("trend_filters") or default_filters()
    st.caption(
        "Select import countries, export countries, and products to view tariff trends. "
        "Each combination creates one line on the chart."
    )
    with st.form("trend_filters_form"):
        import_countries = st.multiselect("Import Countries *", countries, default=[c for c in filters["importCountries"] if c in countries])
        export_countries = st.multiselect("Export Countries *", countries, default=[c for c in filters["exportCountries"] if c in countries])
        selected_products = st.multiselect("Products *", products, default=[p for p in filters["products"] if p in products])
        col1, col2 = st.columns(2)
        start = col1.date_input("Start date", value=date.fromisoformat(filters["dateRange"]["start"]))
        end = col2.date_input("End date", value=date.fromisoformat(filters["dateRange"]["end"]))
        apply_col, reset_col = st.columns(2)
        applied = apply_col.form_submit_button("Apply Filters", type="primary", use_container_width=True)
        reset = reset_col.form_submit_button("Reset", use_container_width=True)

    if reset:
        st.session_state.trend_filters = default_filters()
        st.session_state.trend_series = []
        st.rerun()

    if applied:
        filters = {
            "importCountries": import_countries,
            "exportCountries": export_countries,
            "products": selected_products,
            "dateRange": {"start": start.isoformat(), "end": end.isoformat()},
        }
        st.session_state.trend_filters = filters
        st.session_state.trend_series = []
        error = validate_filters(filters)
        if error:
            st.error(error)
        else:
            try:
                with st.spinner("Loading tariff trends..."):
                    st.session_state.trend_series = format_series(client.tariff_trends(build_params(filters)))
            except ApiError as e:
                logger.error("Error fetching tariff trends data: %s", e)
                st.error("Unable to load tariff data. Please try again later.")

    lines = count_lines(st.session_state.trend_filters)
    st.caption(f"{lines} {'line' if lines == 1 else 'lines'} will be displayed (max {MAX_LINES})")
    if st.session_state.trend_series:
        st.plotly_chart(build_trend_chart(st.session_state.trend_series), use_container_width=True)
        st.caption("Each line shows the tariff rate for a specific import-export-product combination")
