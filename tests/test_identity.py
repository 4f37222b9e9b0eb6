import pytest

from utilities.errors import InvalidHandleError, StorageError
from utilities.identity import Identity, IdentityProvider
from utilities.storage import MemoryStore


def test_load_without_record_is_anonymous(identity):
    assert identity.load() is None
    assert not identity.is_logged_in


def test_save_replaces_the_whole_record(identity):
    identity.save(Identity("alice", "Alice", 1))
    identity.save(Identity("bob", "Bob", 2))
    assert identity.load() == Identity("bob", "Bob", 2)


def test_clear_is_idempotent(identity):
    identity.save(Identity("alice", "Alice", 1))
    identity.clear()
    identity.clear()
    assert identity.load() is None


@pytest.mark.parametrize("raw", ["{oops", "[]", '"just a string"', '{"display_name": "x"}', '{"handle": ""}'])
def test_unreadable_records_load_as_absent(store, identity, raw):
    store.set_item("minilogic_user", raw)
    assert identity.load() is None


def test_load_never_raises_on_storage_failure():
    class FailingStore(MemoryStore):
        def get_item(self, key):
            raise StorageError("down")

    assert IdentityProvider(FailingStore()).load() is None


def test_login_strips_handle_and_ignores_password(identity):
    user = identity.login("  carol ", password="whatever")
    assert user.handle == "carol"
    assert user.display_name == "carol"
    assert identity.load() == user
    assert identity.is_logged_in


@pytest.mark.parametrize("handle", ["", "   ", None])
def test_login_rejects_empty_handles_without_mutating(identity, handle):
    identity.save(Identity("alice", "Alice", 1))
    with pytest.raises(InvalidHandleError):
        identity.login(handle)
    assert identity.load().handle == "alice"


def test_demo_login(identity):
    user = identity.demo_login()
    assert (user.handle, user.display_name) == ("demo", "Demo User")
    assert user.created_at > 0


def test_identity_dict_round_trip():
    user = Identity("dave", "Dave", 123)
    assert Identity.from_dict(user.to_dict()) == user
    assert user.to_dict() == {"handle": "dave", "display_name": "Dave", "created_at": 123}
