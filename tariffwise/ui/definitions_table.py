"""
Tariff definitions table.

Global mode shows the official tariffs with admin overrides merged in; admins
can add, edit and delete overrides. Simulator mode shows the user's own
simulated tariffs, which only affect that user's calculations.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pandas as pd
import streamlit as st

from tariffwise.domains.definitions import (
    SCOPE_MODIFIED,
    SCOPE_USER,
    TARIFF_TYPES,
    build_payload,
    filter_tariffs,
    form_from_tariff,
    generate_tariff_id,
    is_replacement,
    merge_tariffs,
    scope_for_existing,
    write_scope,
)
from tariffwise.domains.validation import validate_tariff_definition
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.ui.downloads import TARIFF_DEFINITIONS_EXPORT, render_csv_download
from tariffwise.ui.session_state import (
    flash,
    invalidate_downloads,
    render_confirmation,
    render_flash,
    request_confirmation,
)
from tariffwise.utils.logger import get_logger

logger = get_logger()

TABLE_COLUMNS = ["product", "exportingFrom", "importingTo", "type", "rate", "effectiveDate", "expirationDate"]
COLUMN_LABELS = {
    "product": "Product",
    "exportingFrom": "Exporting From",
    "importingTo": "Importing To",
    "type": "Type",
    "rate": "Rate (%)",
    "effectiveDate": "Effective Date",
    "expirationDate": "Expiration Date",
}


def load_definitions(client: Any, is_admin: bool, simulator_mode: bool) -> dict[str, list]:
    """Fetch every list the table needs. Raises ApiError on failure."""
    data: dict[str, list] = {"global": [], "modified": [], "user": []}
    if simulator_mode:
        data["user"] = client.list_tariff_definitions(SCOPE_USER)
    else:
        data["global"] = client.list_tariff_definitions("global")
        if is_admin:
            data["modified"] = client.list_tariff_definitions(SCOPE_MODIFIED)
    data["countries"] = client.list_countries()
    data["products"] = client.list_products()
    return data


def add_tariff(
    client: Any,
    form: dict[str, Any],
    simulator_mode: bool,
    is_admin: bool,
    modified: list[dict[str, Any]],
) -> tuple[str, str]:
    """Create a tariff; returns (title, message) for the alert."""
    problem = validate_tariff_definition(form)
    if problem:
        return problem
    payload = build_payload(form, generate_tariff_id(simulator_mode, is_admin))
    replaced = is_replacement(payload, modified)
    try:
        client.create_tariff_definition(write_scope(simulator_mode, is_admin), payload)
    except ApiError as e:
        logger.error("Failed to add tariff: %s", e)
        return ("Error", "Failed to add tariff. Please try again.")
    if simulator_mode or not is_admin:
        return ("Success", "Simulated tariff has been successfully added.")
    if replaced:
        return (
            "Tariff Updated",
            f"The global tariff for {payload['product']} from {payload['exportingFrom']} "
            f"to {payload['importingTo']} has been updated.",
        )
    return ("Success", "New global tariff has been successfully added to the system.")


def update_tariff(client: Any, tariff: dict[str, Any], form: dict[str, Any], simulator_mode: bool) -> tuple[str, str]:
    problem = validate_tariff_definition(form)
    if problem:
        return problem
    try:
        client.update_tariff_definition(scope_for_existing(tariff, simulator_mode), tariff["id"], build_payload(form))
    except ApiError as e:
        logger.error("Failed to update tariff %s: %s", tariff.get("id"), e)
        return ("Error", "Failed to update tariff. Please try again.")
    return ("Success", "Tariff has been successfully updated.")


def delete_tariff(client: Any, tariff_id: str, is_modified_global: bool) -> tuple[str, str]:
    scope = SCOPE_MODIFIED if is_modified_global else SCOPE_USER
    try:
        client.delete_tariff_definition(scope, tariff_id)
    except ApiError as e:
        logger.error("Failed to delete tariff %s: %s", tariff_id, e)
        return ("Error", "Failed to delete tariff. Please try again.")
    if is_modified_global:
        return ("Deleted", "Modified global tariff has been successfully deleted.")
    return ("Deleted", "User-defined tariff has been successfully deleted.")


def definitions_frame(tariffs: list[dict[str, Any]], modified_ids: set[str] | None = None) -> pd.DataFrame:
    """Display frame; with modified_ids, a Status column flags admin overrides."""
    frame = pd.DataFrame([{c: t.get(c) for c in TABLE_COLUMNS} for t in tariffs], columns=TABLE_COLUMNS)
    if modified_ids is not None:
        frame["status"] = ["Modified" if t.get("id") in modified_ids else "Global" for t in tariffs]
    return frame.rename(columns={**COLUMN_LABELS, "status": "Status"})


def _show(result: tuple[str, str]) -> None:
    title, message = result
    kind = "error" if title in ("Error", "Incomplete Information", "Invalid Rate", "Invalid Country Pair") else "success"
    if kind == "success":
        invalidate_downloads()
    flash(kind, f"**{title}**: {message}")


def _parse_date(value: Any) -> date | None:
    try:
        return date.fromisoformat(str(value)[:10]) if value else None
    except ValueError:
        return None


def _tariff_label(t: dict[str, Any]) -> str:
    return f"{t.get('product')} · {t.get('exportingFrom')} → {t.get('importingTo')} ({t.get('type')} {t.get('rate')})"


def _definition_form(
    key: str,
    products: list[str],
    countries: list[str],
    initial: dict[str, Any] | None = None,
    lock_countries: bool = False,
) -> tuple[bool, dict[str, Any]]:
    initial = initial or {}

    def index_of(options: list[str], value: Any) -> int | None:
        return options.index(value) if value in options else None

    with st.form(key, clear_on_submit=not initial):
        product = st.selectbox("Product", products, index=index_of(products, initial.get("product")), placeholder="Select product")
        col1, col2 = st.columns(2)
        exporting = col1.selectbox(
            "Exporting From", countries, index=index_of(countries, initial.get("exportingFrom")),
            placeholder="Select country", disabled=lock_countries,
        )
        importing = col2.selectbox(
            "Importing To", countries, index=index_of(countries, initial.get("importingTo")),
            placeholder="Select country", disabled=lock_countries,
        )
        col3, col4 = st.columns(2)
        tariff_type = col3.selectbox("Tariff Type", TARIFF_TYPES, index=index_of(list(TARIFF_TYPES), initial.get("type")), placeholder="Select type")
        rate = col4.text_input("Rate (%)", value=str(initial.get("rate") or ""), placeholder="e.g., 5.25")
        col5, col6 = st.columns(2)
        effective = col5.date_input(
            "Effective Date",
            value=_parse_date(initial.get("effectiveDate")),
        )
        expiration = col6.text_input(
            "Expiration Date", value=str(initial.get("expirationDate") or ""),
            placeholder='e.g., "Ongoing" or "2025-12-31"',
        )
        submitted = st.form_submit_button("Save", type="primary")

    form = {
        "product": product or "",
        "exportingFrom": (initial.get("exportingFrom") if lock_countries else exporting) or "",
        "importingTo": (initial.get("importingTo") if lock_countries else importing) or "",
        "type": tariff_type or "",
        "rate": rate,
        "effectiveDate": effective.isoformat() if effective else "",
        "expirationDate": expiration.strip(),
    }
    return submitted, form


def render_definitions_table(client: Any, user_role: str, simulator_mode: bool = False) -> None:
    is_admin = user_role == "admin"
    render_flash()
    try:
        with st.spinner("Loading tariffs..."):
            data = load_definitions(client, is_admin, simulator_mode)
    except ApiError as e:
        logger.error("Error loading tariffs: %s", e)
        st.error("An unexpected error occurred while loading tariffs")
        return

    products, countries = data["products"], data["countries"]
    key = "sim" if simulator_mode else "global"

    top_left, top_right = st.columns([3, 1])
    with top_right:
        render_csv_download(
            TARIFF_DEFINITIONS_EXPORT, client.export_tariff_definitions, "tariff-definitions.csv",
            widget_key=f"{key}_export",
        )

    if simulator_mode or is_admin:
        title = "Define Simulated Tariff" if simulator_mode else "Define/Edit Global Tariff"
        with top_left.expander(title):
            st.caption(
                "Create a temporary tariff for simulation purposes. This will not affect global tariffs."
                if simulator_mode else
                "Add or update a global tariff in the system. If a tariff already exists for the same "
                "product and country pair, it will be replaced."
            )
            submitted, form = _definition_form(f"{key}_add_tariff", products, countries)
            if submitted:
                _show(add_tariff(client, form, simulator_mode, is_admin, data["modified"]))
                st.rerun()

    st.markdown("#### Filters")
    f1, f2, f3 = st.columns(3)
    product_filter = f1.selectbox("Product", ["all", *products], key=f"{key}_filter_product")
    exporting_filter = f2.selectbox("Exporting From", ["all", *countries], key=f"{key}_filter_exporting")
    importing_filter = f3.selectbox("Importing To", ["all", *countries], key=f"{key}_filter_importing")

    if simulator_mode:
        tariffs = data["user"]
        st.subheader("Simulated Tariffs")
        st.caption("Temporary tariffs for testing different scenarios. These do not affect global data.")
        if not tariffs:
            st.info('Click "Define Simulated Tariff" above to create temporary tariffs for testing.')
            return
        managed = tariffs
    else:
        tariffs = merge_tariffs(data["global"], data["modified"])
        st.subheader("Global Tariffs")
        st.caption(
            "System tariffs that can be edited by administrators. Admin overrides are marked as Modified."
            if is_admin else "Standard tariffs from the global database."
        )
        managed = tariffs if is_admin else []

    modified_ids = {t.get("id") for t in data["modified"]}
    shown = filter_tariffs(tariffs, product_filter, exporting_filter, importing_filter)
    frame = definitions_frame(shown, modified_ids if is_admin and not simulator_mode else None)
    st.dataframe(frame, use_container_width=True, hide_index=True)
    st.caption(f"Showing {len(shown)} of {len(tariffs)} tariffs")

    if not managed:
        return

    with st.expander("Edit or delete a tariff"):
        choice = st.selectbox(
            "Tariff", managed, index=None, format_func=_tariff_label,
            placeholder="Select a tariff", key=f"{key}_manage_choice",
        )
        if choice is None:
            return
        submitted, form = _definition_form(
            f"{key}_edit_{choice.get('id')}", products, countries,
            initial=form_from_tariff(choice), lock_countries=True,
        )
        if submitted:
            _show(update_tariff(client, choice, form, simulator_mode))
            st.rerun()

        deletable = simulator_mode or choice.get("id") in modified_ids
        if not deletable:
            return
        action = f"{key}_delete_{choice.get('id')}"
        if st.button("Delete tariff", key=action):
            request_confirmation(action)
        if render_confirmation(action, f"Are you sure you want to delete {_tariff_label(choice)}?"):
            _show(delete_tariff(client, choice["id"], is_modified_global=not simulator_mode))
            st.rerun()
