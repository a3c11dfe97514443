"""
TariffWise: Streamlit UI entry point.
"""

import streamlit as st

# Load .env first so the Supabase and backend settings are in place
from tariffwise.utils.config import app_title, load_config, log_file, log_level
load_config()

from tariffwise.infrastructure.api.client import TariffApiClient
from tariffwise.infrastructure.auth.supabase_auth import AuthService, is_admin
from tariffwise.services.calculation_service import SOURCE_GLOBAL, SOURCE_USER, CalculationService
from tariffwise.ui.admin_dashboard import render_admin_dashboard
from tariffwise.ui.auth_forms import render_auth_view
from tariffwise.ui.calculator_form import render_calculator_form
from tariffwise.ui.comparison_panel import render_comparison_panel
from tariffwise.ui.definitions_table import render_definitions_table
from tariffwise.ui.export_cart import render_export_cart
from tariffwise.ui.results_table import render_results_table
from tariffwise.ui.session_state import (
    VIEW_ADMIN,
    VIEW_CART,
    VIEW_DASHBOARD,
    VIEW_GLOBAL_TARIFFS,
    VIEW_SIMULATOR,
    initialize_session_state,
    refresh_cart_count,
    reset_session,
    set_view,
)
from tariffwise.ui.simulator import render_simulator
from tariffwise.ui.trends import render_trends
from tariffwise.utils.logger import get_logger, setup_logger

setup_logger("tariffwise", level=log_level(), log_file=log_file())
log = get_logger()

st.set_page_config(page_title=app_title(), layout="wide")

# The Supabase client holds the signed-in session, so each browser session gets its own
if "auth" not in st.session_state:
    st.session_state.auth = AuthService()
auth: AuthService = st.session_state.auth
if "api" not in st.session_state:
    st.session_state.api = TariffApiClient(token_provider=auth.access_token)
client: TariffApiClient = st.session_state.api
service = CalculationService(client)

initialize_session_state()

if st.session_state.user is None:
    restored = auth.current_user()
    if restored:
        log.info("Restored session for %s", restored.get("email"))
        st.session_state.user = restored
        refresh_cart_count(client)

if st.session_state.user is None:
    st.title(app_title())
    st.caption("Look up, simulate and compare import tariff costs.")
    render_auth_view(auth, client)
    st.stop()

user = st.session_state.user
admin = is_admin(user)

title_col, user_col = st.columns([4, 1])
with title_col:
    st.title(app_title())
with user_col:
    st.markdown(f"**{user.get('name')}**  \n:{'red' if admin else 'blue'}-background[{user.get('role')}]")

nav = [
    (VIEW_DASHBOARD, "Dashboard"),
    (VIEW_GLOBAL_TARIFFS, "Tariff Definitions"),
    (VIEW_SIMULATOR, "Tariff Simulator"),
    (VIEW_CART, f"Export Cart ({st.session_state.cart_count})"),
]
if admin:
    nav.append((VIEW_ADMIN, "Admin"))

with st.sidebar:
    st.header("Navigation")
    for view, label in nav:
        current = st.session_state.current_view == view
        if st.button(label, key=f"nav_{view}", type="primary" if current else "secondary", use_container_width=True):
            set_view(view)
            st.rerun()
    st.divider()
    st.caption(user.get("email") or "")
    if st.button("Logout", use_container_width=True):
        auth.sign_out()
        reset_session()
        st.rerun()

view = st.session_state.current_view
if view == VIEW_ADMIN and not admin:
    set_view(VIEW_DASHBOARD)
    view = VIEW_DASHBOARD

if view == VIEW_DASHBOARD:
    results = render_calculator_form(service, client, source=SOURCE_GLOBAL)
    if results:
        st.session_state.calculation_results = results
    render_results_table(st.session_state.calculation_results, client, key="dashboard")
    with st.expander("Tariff Trends", expanded=False):
        render_trends(client)
    render_comparison_panel(client)

elif view == VIEW_GLOBAL_TARIFFS:
    st.header("Tariff Definitions")
    render_definitions_table(client, user.get("role"), simulator_mode=False)

elif view == VIEW_SIMULATOR:
    st.header("Tariff Simulator")
    defined, custom = st.tabs(["Simulated Tariffs", "Custom Simulator"])
    with defined:
        render_definitions_table(client, user.get("role"), simulator_mode=True)
        results = render_calculator_form(service, client, source=SOURCE_USER)
        if results:
            st.session_state.user_calculation_results = results
        render_results_table(st.session_state.user_calculation_results, client, key="user_calc")
    with custom:
        render_simulator(service, client)

elif view == VIEW_CART:
    st.header("Export Cart")
    render_export_cart(client)

elif view == VIEW_ADMIN:
    render_admin_dashboard(client)
