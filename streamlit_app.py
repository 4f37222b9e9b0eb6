import logging

import streamlit as st

from utilities import app_state

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Page config
st.set_page_config(page_title="MiniLogicPlay", page_icon="🧩", layout="wide")

# Hide default multipage sidebar
st.markdown("""
<style>
    [data-testid="stSidebarNav"] {
        display: none;
    }
</style>
""", unsafe_allow_html=True)

services = app_state.init_services()
router = app_state.build_router(services)

# Sidebar
with st.sidebar:
    app_state.render_auth_controls(services, router)
    st.markdown("---")
    # Filled after routing so the selected entry matches the game just shown
    nav_slot = st.container()

app_state.route(router)

with nav_slot:
    app_state.render_game_navigation(router)
