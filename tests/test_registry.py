import pytest

from utilities.errors import DuplicateGameError


def noop(surface, caps):
    pass


def test_list_preserves_registration_order(registry):
    for game_id in ("c", "a", "b"):
        registry.register(game_id, game_id.upper(), "", noop)
    assert [d.id for d in registry.list()] == ["c", "a", "b"]
    assert [d.id for d in registry] == ["c", "a", "b"]
    assert len(registry) == 3


def test_get_returns_descriptor_or_none(registry):
    descriptor = registry.register("quiz", "Quiz", "Questions", noop)
    assert registry.get("quiz") is descriptor
    assert descriptor.title == "Quiz"
    assert descriptor.init is noop
    assert registry.get("missing") is None
    assert "quiz" in registry
    assert "missing" not in registry


def test_duplicate_ids_are_rejected(registry):
    registry.register("quiz", "Quiz", "", noop)
    with pytest.raises(DuplicateGameError) as exc:
        registry.register("quiz", "Another Quiz", "", noop)
    assert exc.value.game_id == "quiz"
    assert registry.get("quiz").title == "Quiz"
    assert len(registry) == 1


def test_empty_id_is_rejected(registry):
    with pytest.raises(ValueError):
        registry.register("", "Nameless", "", noop)


def test_descriptors_are_immutable(registry):
    descriptor = registry.register("quiz", "Quiz", "", noop)
    with pytest.raises(AttributeError):
        descriptor.title = "Changed"
