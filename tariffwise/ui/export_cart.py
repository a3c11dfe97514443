"""Export cart: session history on one side, calculations queued for CSV export on the other."""

from __future__ import annotations

from typing import Any, Callable

import streamlit as st

from tariffwise.domains.cart import cart_frame, csv_filename, history_not_in_cart, plural, toggle, toggle_all
from tariffwise.domains.currency import format_currency
from tariffwise.infrastructure.api.client import ApiError
from tariffwise.ui.downloads import CART_EXPORT, render_csv_download
from tariffwise.ui.session_state import (
    flash,
    invalidate_downloads,
    refresh_cart_count,
    render_confirmation,
    render_flash,
    request_confirmation,
)
from tariffwise.utils.logger import get_logger

logger = get_logger()


def _run_batch(action: Callable[[str], None], selected: set[str], verb: str) -> tuple[int, set[str], str | None]:
    """Apply action to every id; returns (succeeded, failed ids, last error message)."""
    succeeded, failed, last_error = 0, set(), None
    for calculation_id in sorted(selected):
        try:
            action(calculation_id)
        except ApiError as e:
            logger.error("Error %s %s: %s", verb, calculation_id, e)
            failed.add(calculation_id)
            last_error = e.message
        else:
            succeeded += 1
    return succeeded, failed, last_error


def add_selected_to_cart(client: Any, selected: set[str]) -> tuple[int, set[str], str]:
    """
    Add every selected history entry, one request per id.

    Returns (added count, ids that failed, banner text). A failed id does not
    stop the rest of the batch.
    """
    if not selected:
        return 0, set(), "Please select at least one calculation to add to cart"
    added, failed, error = _run_batch(client.add_to_cart, selected, "adding to cart")
    if not added:
        return 0, failed, f"Failed to add items to cart: {error}"
    message = f"Successfully added {plural(added)} to cart"
    if failed:
        message += f". {plural(len(failed))} could not be added: {error}"
    return added, failed, message


def remove_selected_from_cart(client: Any, selected: set[str]) -> tuple[int, set[str], str]:
    if not selected:
        return 0, set(), "Please select at least one item to delete"
    removed, failed, error = _run_batch(client.remove_from_cart, selected, "removing from cart")
    if not removed:
        return 0, failed, f"Failed to delete items: {error}"
    message = f"Successfully deleted {plural(removed)}"
    if failed:
        message += f". {plural(len(failed))} could not be deleted: {error}"
    return removed, failed, message


def clear_cart(client: Any) -> tuple[bool, str]:
    try:
        client.clear_cart()
    except ApiError as e:
        logger.error("Error clearing cart: %s", e)
        return False, f"Failed to clear cart: {e.message}"
    return True, "Export cart cleared successfully"


def _item_label(item: dict[str, Any]) -> str:
    return (
        f"**{item.get('productName')}** · {item.get('exportingFrom')} → {item.get('importingTo')} · "
        f"{format_currency(item.get('totalCost'), item.get('currency'))} · {item.get('calculationDate') or ''}"
    )


def _render_selectable(items: list[dict[str, Any]], state_key: str, widget_prefix: str) -> None:
    selected: set[str] = st.session_state[state_key]
    all_selected = bool(items) and selected >= {i.get("id") for i in items}
    if st.button("Deselect all" if all_selected else "Select all", key=f"{widget_prefix}_all"):
        st.session_state[state_key] = toggle_all(selected, items)
        for item in items:
            st.session_state.pop(f"{widget_prefix}_{item.get('id')}", None)
        st.rerun()

    for item in items:
        item_id = item.get("id")
        checked = st.checkbox(_item_label(item), value=item_id in selected, key=f"{widget_prefix}_{item_id}")
        if checked != (item_id in selected):
            st.session_state[state_key] = toggle(st.session_state[state_key], item_id)


def _finish(succeeded: int, failed: set[str], message: str, client: Any, state_key: str) -> None:
    """Keep only the failed ids selected and refresh the badge when anything changed."""
    st.session_state[state_key] = set(failed)
    if succeeded:
        refresh_cart_count(client)
        invalidate_downloads()
    if succeeded and not failed:
        kind = "success"
    else:
        kind = "warning" if succeeded else "error"
    flash(kind, message)
    st.rerun()


def render_export_cart(client: Any) -> None:
    render_flash()
    try:
        with st.spinner("Loading data..."):
            cart = client.list_cart()
            history = client.list_history()
    except ApiError as e:
        logger.error("Error loading cart data: %s", e)
        st.error(f"Failed to load data: {e.message}")
        return

    available = history_not_in_cart(history, cart)
    cart_ids = {i.get("id") for i in cart}
    history_ids = {i.get("id") for i in available}
    st.session_state.selected_cart_items &= cart_ids
    st.session_state.selected_history_items &= history_ids

    history_col, cart_col = st.columns(2)

    with history_col, st.container(border=True):
        st.subheader(f"Session History ({len(available)})")
        st.caption("Calculations from this session that are not yet in your export cart.")
        if not available:
            st.info("No calculations in session history")
        else:
            _render_selectable(available, "selected_history_items", "history")
            count = len(st.session_state.selected_history_items)
            if st.button(f"Add to Cart ({count})", type="primary", disabled=count == 0, key="history_add"):
                added, failed, message = add_selected_to_cart(client, st.session_state.selected_history_items)
                _finish(added, failed, message, client, "selected_history_items")

    with cart_col, st.container(border=True):
        st.subheader(f"Export Cart ({len(cart)})")
        if not cart:
            st.info("Export cart is empty")
            return
        _render_selectable(cart, "selected_cart_items", "cart")
        count = len(st.session_state.selected_cart_items)

        delete_col, clear_col, export_col = st.columns(3)
        if delete_col.button(f"Delete ({count})", disabled=count == 0, key="cart_delete"):
            request_confirmation("cart_delete")
        if clear_col.button("Clear Cart", key="cart_clear"):
            request_confirmation("cart_clear")
        with export_col:
            render_csv_download(CART_EXPORT, client.export_cart_csv, csv_filename())

        if render_confirmation("cart_delete", f"Are you sure you want to delete {plural(count)}?"):
            removed, failed, message = remove_selected_from_cart(client, st.session_state.selected_cart_items)
            _finish(removed, failed, message, client, "selected_cart_items")
        if render_confirmation("cart_clear", "Are you sure you want to clear all items from the export cart?"):
            ok, message = clear_cart(client)
            _finish(int(ok), set(), message, client, "selected_cart_items")

        st.dataframe(cart_frame(cart), use_container_width=True, hide_index=True)
