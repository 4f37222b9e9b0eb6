import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Router state lives in the session mapping under these keys
ACTIVE_KEY = "_router_active"
SURFACE_STATE_KEY = "_router_surface_state"


@dataclass
class Surface:
    """
    What a game renders into. `container` is the presentation container for this run,
    `state` holds UI-only state that survives reruns and is dropped on navigation.
    """

    game_id: str
    container: Any
    state: dict = field(default_factory=dict)


class Router:
    """
    Two states: Idle (home, no game surface) and Active(game id).

    navigate_to() performs a transition: the previous surface and its UI state are
    discarded, a fresh surface is built and the game's init is called once.
    redraw() re-renders the active game on a Streamlit rerun, keeping its UI state.
    """

    def __init__(self, registry, slot_factory, capabilities_factory, session=None, home=None):
        """
        slot_factory returns a placeholder (st.empty() in the app) whose .container() is
        drawn into and whose .empty() wipes everything drawn so far.
        """
        self._registry = registry
        self._slot_factory = slot_factory
        self._capabilities_factory = capabilities_factory
        self._session = {} if session is None else session
        self._home = home
        if ACTIVE_KEY not in self._session:
            self._session[ACTIVE_KEY] = None

    @property
    def active_id(self) -> str | None:
        return self._session[ACTIVE_KEY]

    def navigation_entries(self):
        """(descriptor, selected) pairs in registration order. Selection is matched by id."""
        active = self.active_id
        return [(d, d.id == active) for d in self._registry.list()]

    def navigate_to(self, game_id):
        self._discard()
        descriptor = self._registry.get(game_id) if game_id else None
        if descriptor is None:
            if game_id:
                logger.debug("No game registered as '%s', showing home", game_id)
            self._show_home()
            return None

        self._session[ACTIVE_KEY] = descriptor.id
        self._session[SURFACE_STATE_KEY] = {}
        logger.debug("Navigated to '%s'", descriptor.id)
        return self._mount(descriptor)

    def redraw(self):
        descriptor = self._registry.get(self.active_id) if self.active_id else None
        if descriptor is None:
            self._discard()
            self._show_home()
            return None
        self._session.setdefault(SURFACE_STATE_KEY, {})
        return self._mount(descriptor)

    def _mount(self, descriptor):
        slot = self._slot_factory()
        surface = Surface(descriptor.id, slot.container(), self._session[SURFACE_STATE_KEY])
        capabilities = self._capabilities_factory()
        try:
            descriptor.init(surface, capabilities)
        except Exception as e:
            # A crashing game must not take navigation down with it
            logger.exception("Game '%s' failed during init, falling back to home", descriptor.id)
            self._discard()
            # Drop whatever the game drew before it failed
            slot.empty()
            capabilities.notify(f"{descriptor.title} stopped unexpectedly: {e}", icon="⚠️")
            self._show_home()
            return None
        return surface

    def _discard(self):
        self._session[ACTIVE_KEY] = None
        self._session.pop(SURFACE_STATE_KEY, None)

    def _show_home(self):
        if self._home is not None:
            self._home(self._slot_factory().container())
