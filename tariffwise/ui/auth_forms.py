"""Login and signup forms shown before the dashboard."""

from __future__ import annotations

import streamlit as st

from tariffwise.infrastructure.auth.supabase_auth import AuthError, AuthService
from tariffwise.ui.session_state import AUTH_LOGIN, AUTH_SIGNUP, flash, refresh_cart_count, render_flash
from tariffwise.utils.logger import get_logger

logger = get_logger()


def _complete_login(user: dict, client) -> None:
    st.session_state.user = user
    refresh_cart_count(client)
    st.rerun()


def render_login_form(auth: AuthService, client) -> None:
    st.subheader("Sign in")
    render_flash()
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="you@company.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", type="primary", use_container_width=True)
    if submitted:
        try:
            user = auth.sign_in(email.strip(), password)
        except AuthError as e:
            st.error(str(e))
        else:
            _complete_login(user, client)

    if st.button("Don't have an account? Sign up"):
        st.session_state.auth_view = AUTH_SIGNUP
        st.rerun()


def render_signup_form(auth: AuthService, client) -> None:
    st.subheader("Create an account")
    with st.form("signup_form"):
        full_name = st.text_input("Full name")
        email = st.text_input("Email", placeholder="you@company.com")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Sign up", type="primary", use_container_width=True)
    if submitted:
        if password != confirm:
            st.error("Passwords do not match")
        else:
            try:
                user = auth.sign_up(email.strip(), password, full_name.strip())
            except AuthError as e:
                st.error(str(e))
            else:
                if user is None:
                    flash("success", "Account created. Please check your email to confirm your account, then sign in.")
                    st.session_state.auth_view = AUTH_LOGIN
                    st.rerun()
                else:
                    _complete_login(user, client)

    if st.button("Already have an account? Sign in"):
        st.session_state.auth_view = AUTH_LOGIN
        st.rerun()


def render_auth_view(auth: AuthService, client) -> None:
    _, center, _ = st.columns([1, 2, 1])
    with center:
        if st.session_state.auth_view == AUTH_SIGNUP:
            render_signup_form(auth, client)
        else:
            render_login_form(auth, client)
