import logging
from dataclasses import dataclass
from typing import Any, Callable

from utilities.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """The narrow set of services a game module receives from the router."""

    save_state: Callable[[str, Any], None]
    load_state: Callable[[str], Any]
    is_logged_in: bool
    notify: Callable[..., None]


class StatePersistence:
    """
    Saves and loads per-game state under a namespace derived from the current identity.
    Keys look like "<prefix>:<handle>:<game id>", with an anonymous handle when signed out.
    """

    def __init__(self, store, identity_provider, prefix: str = "mlp_state", anonymous_handle: str = "anon"):
        self._store = store
        self._identity = identity_provider
        self._prefix = prefix
        self._anonymous = anonymous_handle

    def resolve_namespace(self) -> str:
        identity = self._identity.load()
        return identity.handle if identity else self._anonymous

    def storage_key(self, game_id: str) -> str:
        return f"{self._prefix}:{self.resolve_namespace()}:{game_id}"

    def save(self, game_id: str, state) -> bool:
        """
        Writes the state. Failures are logged and swallowed, so callers must not
        rely on this succeeding; the return value says whether it did.
        """
        key = self.storage_key(game_id)
        try:
            self._store.set_json(key, state)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning("Failed to save state for '%s': %s", key, e)
            return False
        return True

    def load(self, game_id: str):
        """Returns the saved state, or None if it is missing, corrupt or unreadable."""
        key = self.storage_key(game_id)
        try:
            return self._store.get_json(key)
        except StorageError as e:
            logger.warning("Failed to load state for '%s': %s", key, e)
            return None

    def reset(self, game_id: str) -> None:
        key = self.storage_key(game_id)
        try:
            self._store.delete(key)
        except StorageError as e:
            logger.warning("Failed to reset state for '%s': %s", key, e)

    def saved_games(self) -> list[str]:
        """Game ids that have saved state in the current namespace."""
        prefix = f"{self._prefix}:{self.resolve_namespace()}:"
        try:
            keys = self._store.keys(prefix)
        except StorageError as e:
            logger.warning("Failed to list saved games: %s", e)
            return []
        return sorted(k[len(prefix):] for k in keys)

    def capabilities(self, notify) -> Capabilities:
        return Capabilities(
            save_state=self.save,
            load_state=self.load,
            is_logged_in=self._identity.is_logged_in,
            notify=notify,
        )
