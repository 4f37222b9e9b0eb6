from utilities.errors import StorageError
from utilities.identity import Identity
from utilities.storage import MemoryStore
from utilities.persistence import StatePersistence


def test_namespace_falls_back_to_anonymous(persistence):
    assert persistence.resolve_namespace() == "anon"
    assert persistence.storage_key("logic-quiz") == "mlp_state:anon:logic-quiz"


def test_namespace_follows_identity(persistence, identity):
    identity.login("alice")
    assert persistence.storage_key("logic-quiz") == "mlp_state:alice:logic-quiz"


def test_save_then_load_returns_equal_state(persistence):
    state = {"moves": 12, "best": None, "history": [1, 2, 3]}
    assert persistence.save("memory-match", state)
    assert persistence.load("memory-match") == state


def test_missing_state_loads_as_none(persistence):
    assert persistence.load("logic-quiz") is None


def test_state_is_isolated_between_identities(persistence, identity):
    identity.login("alice")
    persistence.save("logic-quiz", {"score": 3, "index": 3})

    identity.login("bob")
    assert persistence.load("logic-quiz") is None
    persistence.save("logic-quiz", {"score": 1, "index": 1})

    identity.clear()
    assert persistence.load("logic-quiz") is None

    identity.login("alice")
    assert persistence.load("logic-quiz") == {"score": 3, "index": 3}


def test_anonymous_state_is_not_migrated_on_login(persistence, identity):
    persistence.save("logic-quiz", {"score": 2, "index": 2})
    identity.login("alice")
    assert persistence.load("logic-quiz") is None


def test_save_failures_are_swallowed(identity, caplog):
    class FailingStore(MemoryStore):
        def set_item(self, key, value):
            raise StorageError("quota exceeded")

    persistence = StatePersistence(FailingStore(), identity)
    assert persistence.save("logic-quiz", {"score": 1}) is False
    assert "Failed to save state" in caplog.text


def test_unserializable_state_is_not_saved(persistence):
    assert persistence.save("logic-quiz", {"when": object()}) is False
    assert persistence.load("logic-quiz") is None


def test_corrupt_state_loads_as_none(store, persistence):
    store.set_item("mlp_state:anon:logic-quiz", "{broken")
    assert persistence.load("logic-quiz") is None


def test_saved_games_and_reset(persistence, identity):
    persistence.save("logic-quiz", {"score": 0, "index": 0})
    persistence.save("memory-match", {"moves": 0, "best": None})
    identity.login("alice")
    persistence.save("logic-quiz", {"score": 1, "index": 1})

    assert persistence.saved_games() == ["logic-quiz"]
    identity.clear()
    assert persistence.saved_games() == ["logic-quiz", "memory-match"]

    persistence.reset("memory-match")
    assert persistence.saved_games() == ["logic-quiz"]


def test_capabilities_are_bound_to_the_service(persistence, identity, notifier):
    caps = persistence.capabilities(notifier)
    assert caps.is_logged_in is False
    caps.save_state("logic-quiz", {"score": 1, "index": 1})
    assert caps.load_state("logic-quiz") == {"score": 1, "index": 1}
    caps.notify("hello")
    assert notifier.messages == ["hello"]

    identity.login("alice")
    assert persistence.capabilities(notifier).is_logged_in is True
