import logging
from dataclasses import dataclass
from functools import partial

import streamlit as st

from games.catalog import register_default_games
from utilities.config import PortalSettings, load_settings
from utilities.errors import InvalidHandleError
from utilities.home import TAGLINE, render_home
from utilities.identity import IdentityProvider
from utilities.persistence import StatePersistence
from utilities.registry import GameRegistry
from utilities.router import Router
from utilities.storage import BrowserStore, build_store

logger = logging.getLogger(__name__)

HOME_ID = "home"
NAV_REQUEST_KEY = "_nav_request"


@dataclass
class Services:
    settings: PortalSettings
    registry: GameRegistry
    identity: IdentityProvider
    persistence: StatePersistence


# --- PROCESS-WIDE RESOURCES (built once per server) ---

@st.cache_resource
def get_settings():
    return load_settings()


@st.cache_resource
def get_game_store(_settings):
    """The store holding game progress; shared by every browser session."""
    return build_store(_settings)


@st.cache_resource
def get_registry(_settings):
    return register_default_games(GameRegistry(), _settings)


def init_services() -> Services:
    """Wires the per-session services on top of the cached process-wide resources."""
    settings = get_settings()
    # The signed-in label belongs to one browser: cached in the session and kept
    # in the page url so a reload finds it again. Never shared between visitors.
    identity = IdentityProvider(
        BrowserStore(st.session_state, st.query_params, namespace="_identity"), settings.identity_key
    )
    persistence = StatePersistence(
        get_game_store(settings),
        identity,
        prefix=settings.state_prefix,
        anonymous_handle=settings.anonymous_handle,
    )
    return Services(settings, get_registry(settings), identity, persistence)


def notify(message, icon=None):
    st.toast(message, icon=icon)


def build_router(services: Services) -> Router:
    return Router(
        services.registry,
        slot_factory=st.empty,
        capabilities_factory=lambda: services.persistence.capabilities(notify),
        session=st.session_state,
        home=partial(render_home, registry=services.registry, persistence=services.persistence),
    )


# --- NAVIGATION ---

def request_navigation(game_id):
    """Callback: the router picks the request up when the script body runs."""
    st.session_state[NAV_REQUEST_KEY] = game_id


def route(router: Router):
    if NAV_REQUEST_KEY in st.session_state:
        router.navigate_to(st.session_state.pop(NAV_REQUEST_KEY))
    else:
        router.redraw()


def render_game_navigation(router: Router):
    """Renders the game list in the sidebar, one button per registered game."""
    st.markdown("## Games 🧭")
    st.button(
        "🏠 Home",
        key="nav_home",
        type="primary" if router.active_id is None else "secondary",
        on_click=request_navigation,
        args=(HOME_ID,),
        use_container_width=True,
    )
    for descriptor, selected in router.navigation_entries():
        st.button(
            descriptor.title,
            key=f"nav_{descriptor.id}",
            help=descriptor.description,
            type="primary" if selected else "secondary",
            on_click=request_navigation,
            args=(descriptor.id,),
            use_container_width=True,
        )


# --- AUTH (cosmetic, demo only) ---

def _renavigate(router: Router):
    # A new identity means a new namespace, so the open game is rebuilt from its state
    request_navigation(router.active_id or HOME_ID)


def _demo_login(identity: IdentityProvider, router: Router):
    identity.demo_login()
    _renavigate(router)


def _logout(identity: IdentityProvider):
    identity.clear()
    request_navigation(HOME_ID)


def render_auth_controls(services: Services, router: Router):
    """Renders the player panel in the sidebar: welcome message, login form, profile and logout."""
    identity = services.identity
    user = identity.load()

    st.markdown("## Player 👤")

    if user:
        st.markdown(f"Hello, **{user.display_name}**!")
        profile_col, logout_col = st.columns(2)
        show_profile = profile_col.button("Profile", key="btn-profile", use_container_width=True)
        logout_col.button(
            "Logout", key="btn-logout", on_click=_logout, args=(identity,), use_container_width=True
        )
        if show_profile:
            st.info(f"Signed in as {user.display_name}  \nUsername: {user.handle}")
        return

    st.caption(TAGLINE)
    with st.form("auth-form", clear_on_submit=True):
        username = st.text_input("Username", key="auth-username")
        # Not used for anything: there is no real authentication
        password = st.text_input("Password", type="password", key="auth-password")
        login_col, signup_col = st.columns(2)
        login = login_col.form_submit_button("Log in")
        signup = signup_col.form_submit_button("Sign up")

    if login or signup:
        try:
            identity.login(username, password)
        except InvalidHandleError as e:
            st.error(str(e))
        else:
            _renavigate(router)
            st.rerun()

    st.button(
        "Try the demo account",
        key="auth-demo",
        on_click=_demo_login,
        args=(identity, router),
        use_container_width=True,
    )
