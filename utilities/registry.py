import logging
from dataclasses import dataclass
from typing import Callable

from utilities.errors import DuplicateGameError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameDescriptor:
    id: str
    title: str
    description: str
    init: Callable


class GameRegistry:
    """Games selectable in the portal, kept in registration order."""

    def __init__(self):
        self._games: dict[str, GameDescriptor] = {}

    def register(self, id: str, title: str, description: str, init: Callable) -> GameDescriptor:
        """Adds a game. Registering an id that already exists raises DuplicateGameError."""
        if not id:
            raise ValueError("Game id must be a non-empty string.")
        if id in self._games:
            raise DuplicateGameError(id)
        descriptor = GameDescriptor(id=id, title=title, description=description, init=init)
        self._games[id] = descriptor
        logger.info("Registered game: %s (%s)", id, title)
        return descriptor

    def get(self, id: str) -> GameDescriptor | None:
        return self._games.get(id)

    def list(self) -> list[GameDescriptor]:
        return list(self._games.values())

    def __contains__(self, id) -> bool:
        return id in self._games

    def __iter__(self):
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._games)
