class PortalError(Exception):
    """Base class for errors raised by the game portal."""


class StorageError(PortalError):
    """A store backend failed to read or write a value."""


class DuplicateGameError(PortalError, ValueError):
    """A game id was registered twice."""

    def __init__(self, game_id: str):
        super().__init__(f"A game with id '{game_id}' is already registered.")
        self.game_id = game_id


class InvalidHandleError(PortalError, ValueError):
    """A login was attempted without a usable handle."""
