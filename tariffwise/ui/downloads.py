"""CSV downloads fetched on request and kept in session state until the next write."""

from __future__ import annotations

from typing import Callable

import streamlit as st

from tariffwise.infrastructure.api.client import ApiError
from tariffwise.utils.logger import get_logger

logger = get_logger()

TARIFF_DEFINITIONS_EXPORT = "tariff_definitions"
CART_EXPORT = "cart"


def prepare_download(key: str, fetch: Callable[[], bytes]) -> bytes | None:
    """Fetch an export once and remember it; returns None when the backend fails."""
    downloads = st.session_state.downloads
    if key not in downloads:
        try:
            downloads[key] = fetch()
        except ApiError as e:
            logger.error("Error exporting %s: %s", key, e)
            return None
    return downloads[key]


def render_csv_download(
    key: str,
    fetch: Callable[[], bytes],
    file_name: str,
    label: str = "Export CSV",
    widget_key: str | None = None,
) -> None:
    """Show "Prepare CSV" until the export has been fetched, then the download button."""
    widget_key = widget_key or key
    data = st.session_state.downloads.get(key)
    if data is None:
        if st.button("Prepare CSV", key=f"{widget_key}_prepare"):
            if prepare_download(key, fetch) is None:
                st.error("Failed to export CSV")
                return
            st.rerun()
        return
    st.download_button(label, data=data, file_name=file_name, mime="text/csv", key=f"{widget_key}_download")
