"""Streamlit session state: defaults, view switching and logout reset."""

from __future__ import annotations

from typing import Any

import streamlit as st

from tariffwise.domains.trends import default_filters

VIEW_DASHBOARD = "dashboard"
VIEW_GLOBAL_TARIFFS = "global-tariffs"
VIEW_SIMULATOR = "simulator-tariffs"
VIEW_CART = "cart"
VIEW_ADMIN = "admin"

VIEWS = (VIEW_DASHBOARD, VIEW_GLOBAL_TARIFFS, VIEW_SIMULATOR, VIEW_CART, VIEW_ADMIN)

AUTH_LOGIN = "login"
AUTH_SIGNUP = "signup"


def _defaults() -> dict[str, Any]:
    return {
        "user": None,
        "auth_view": AUTH_LOGIN,
        "current_view": VIEW_DASHBOARD,
        "cart_count": 0,
        "calculation_results": None,
        "user_calculation_results": None,
        "simulator_result": None,
        "comparison_result": None,
        "trend_filters": default_filters(),
        "trend_series": [],
        "selected_cart_items": set(),
        "selected_history_items": set(),
        "flash": None,
        "pending_confirmation": None,
        "downloads": {},
    }


def initialize_session_state() -> None:
    """Set every key the views read, without touching keys that already exist."""
    for key, value in _defaults().items():
        if key not in st.session_state:
            st.session_state[key] = value


def reset_session() -> None:
    """Forget the signed-in user and everything derived from their data."""
    for key, value in _defaults().items():
        st.session_state[key] = value


def set_view(view: str) -> None:
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view}")
    st.session_state.current_view = view


def flash(kind: str, message: str) -> None:
    """Queue a banner that survives the next st.rerun()."""
    st.session_state.flash = (kind, message)


def render_flash() -> None:
    pending = st.session_state.get("flash")
    if not pending:
        return
    st.session_state.flash = None
    kind, message = pending
    getattr(st, kind, st.info)(message)


def refresh_cart_count(client: Any) -> int:
    st.session_state.cart_count = client.cart_count()
    return st.session_state.cart_count


def invalidate_downloads() -> None:
    """Drop prepared CSV exports; call after any write that changes their contents."""
    st.session_state.downloads = {}


def request_confirmation(action: str) -> None:
    st.session_state.pending_confirmation = action


def render_confirmation(action: str, prompt: str) -> bool:
    """
    Confirm/Cancel prompt for a destructive action queued with request_confirmation.

    Returns True on the run where the user confirms; the pending action is
    cleared either way.
    """
    if st.session_state.get("pending_confirmation") != action:
        return False
    st.warning(prompt)
    confirm_col, cancel_col = st.columns(2)
    if confirm_col.button("Confirm", type="primary", key=f"{action}_confirm"):
        st.session_state.pending_confirmation = None
        return True
    if cancel_col.button("Cancel", key=f"{action}_cancel"):
        st.session_state.pending_confirmation = None
        st.rerun()
    return False
