import pytest

from productivity.realtime.presence import PresenceRegistry


def test_first_connection_goes_online():
    registry = PresenceRegistry()
    assert registry.register_connection("alice", "c1") is True
    assert registry.connections_for("alice") == {"c1"}
    assert registry.is_online("alice")
    assert "alice" in registry


def test_additional_connections_do_not_transition():
    registry = PresenceRegistry()
    registry.register_connection("alice", "c1")
    assert registry.register_connection("alice", "c2") is False
    assert registry.connections_for("alice") == {"c1", "c2"}
    assert len(registry) == 1
    assert registry.connection_count == 2  # noqa: PLR2004


def test_only_last_disconnect_goes_offline():
    registry = PresenceRegistry()
    registry.register_connection("alice", "c1")
    registry.register_connection("alice", "c2")

    assert registry.unregister_connection("c1") is None
    assert registry.is_online("alice")

    assert registry.unregister_connection("c2") == "alice"
    assert not registry.is_online("alice")
    assert registry.online_users() == []


def test_unknown_connection_is_ignored():
    registry = PresenceRegistry()
    assert registry.unregister_connection("ghost") is None


def test_reregistering_same_connection_is_idempotent():
    registry = PresenceRegistry()
    registry.register_connection("alice", "c1")
    assert registry.register_connection("alice", "c1") is False
    assert registry.connection_count == 1


def test_connection_identity_is_immutable():
    registry = PresenceRegistry()
    registry.register_connection("alice", "c1")
    with pytest.raises(ValueError, match="already registered"):
        registry.register_connection("bob", "c1")
    assert registry.user_for("c1") == "alice"


def test_online_users_sorted_and_clear():
    registry = PresenceRegistry()
    registry.register_connection("carol", "c3")
    registry.register_connection("alice", "c1")
    assert registry.online_users() == ["alice", "carol"]

    registry.clear()
    assert registry.online_users() == []
    assert registry.user_for("c1") is None
