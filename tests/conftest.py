import pytest

from utilities.identity import IdentityProvider
from utilities.persistence import StatePersistence
from utilities.registry import GameRegistry
from utilities.storage import MemoryStore


class FakeContainer:
    """Stands in for a Streamlit container; records how often it is entered."""

    def __init__(self, name="container"):
        self.name = name
        self.entered = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, *exc):
        return False


class FakeSlot:
    """Stands in for st.empty(): one container, which empty() wipes."""

    def __init__(self, name="slot"):
        self.name = name
        self.container_obj = FakeContainer(name)
        self.emptied = False

    def container(self):
        return self.container_obj

    def empty(self):
        self.emptied = True


class Notifier:
    def __init__(self):
        self.messages = []

    def __call__(self, message, icon=None):
        self.messages.append(message)


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def identity(store):
    # Same backing store as game state, like a browser's localStorage
    return IdentityProvider(store)


@pytest.fixture()
def persistence(store, identity):
    return StatePersistence(store, identity)


@pytest.fixture()
def registry():
    return GameRegistry()


@pytest.fixture()
def notifier():
    return Notifier()


@pytest.fixture()
def slots():
    made = []

    def factory():
        made.append(FakeSlot(f"surface-{len(made)}"))
        return made[-1]

    factory.made = made
    return factory
