from functools import partial

from games import memory_match, quiz


def register_default_games(registry, settings=None):
    """Registers the bundled games. The quiz comes first in the navigation."""
    registry.register(quiz.GAME_ID, quiz.TITLE, quiz.DESCRIPTION, quiz.init)

    memory_init = memory_match.init
    if settings is not None:
        memory_init = partial(
            memory_match.init, pairs=settings.memory_pairs, reveal_delay=settings.reveal_delay
        )
    registry.register(memory_match.GAME_ID, memory_match.TITLE, memory_match.DESCRIPTION, memory_init)
    return registry
