"""Admin dashboard: system statistics and global tariff management."""

from __future__ import annotations

from typing import Any

import streamlit as st

from tariffwise.infrastructure.api.client import ApiError
from tariffwise.ui.definitions_table import render_definitions_table
from tariffwise.ui.downloads import TARIFF_DEFINITIONS_EXPORT, render_csv_download
from tariffwise.utils.logger import get_logger

logger = get_logger()

STAT_CARDS = (
    ("totalTariffs", "Total Tariffs"),
    ("totalProducts", "Products"),
    ("totalCountries", "Countries"),
    ("totalCountryPairs", "Country Pairs"),
)


def load_stats(client: Any) -> dict[str, int]:
    """Dashboard counters; missing or failed stats read as zero."""
    try:
        stats = client.dashboard_stats()
    except ApiError as e:
        logger.error("Error loading dashboard stats: %s", e)
        stats = {}
    return {key: int(stats.get(key) or 0) for key, _ in STAT_CARDS}


def render_admin_dashboard(client: Any) -> None:
    st.header("Admin Dashboard")
    st.caption("Manage tariffs and monitor system activity")

    overview, tariffs = st.tabs(["Overview", "Manage Tariffs"])

    with overview:
        with st.spinner("Loading dashboard..."):
            stats = load_stats(client)
        for column, (key, label) in zip(st.columns(len(STAT_CARDS)), STAT_CARDS):
            column.metric(label, stats[key])

        with st.container(border=True):
            st.subheader("Quick Actions")
            st.caption("Common administrative tasks")
            render_csv_download(
                TARIFF_DEFINITIONS_EXPORT, client.export_tariff_definitions, "tariff-definitions.csv",
                label="Export Data", widget_key="admin_export",
            )

        with st.container(border=True):
            st.subheader("System Information")
            st.caption("Current system status and configuration")
            st.markdown(
                "- **System Status**: :green[Operational]\n"
                "- **Database**: :green[Connected]\n"
                "- **User Management**: :green[Active]"
            )

    with tariffs:
        render_definitions_table(client, "admin", simulator_mode=False)
