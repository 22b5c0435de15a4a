import pytest

from tests.realtime.fakes import RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def hub(transport):
    from productivity.realtime.conf import RealtimeSettings  # noqa: PLC0415
    from productivity.realtime.hub import RealtimeHub  # noqa: PLC0415

    return RealtimeHub(transport, RealtimeSettings())


@pytest.fixture
def live_hub(monkeypatch, transport):
    """The hub behind the Socket.IO server, on a recording transport."""
    from productivity.realtime.socketio import hub as server_hub  # noqa: PLC0415

    monkeypatch.setattr(server_hub, "transport", transport)
    server_hub.reset()
    yield server_hub
    server_hub.reset()


@pytest.fixture
def socket_server(monkeypatch):
    """The real Socket.IO server with a fresh client manager and captured frames."""
    from tests.realtime.harness import ServerHarness  # noqa: PLC0415

    harness = ServerHarness(monkeypatch)
    harness.hub.reset()
    yield harness
    harness.hub.reset()


@pytest.fixture
def user(db, django_user_model):
    return django_user_model.objects.create_user(
        username="alice",
        email="alice@example.com",
        password="AlicePass!123",  # noqa: S106
    )


@pytest.fixture
def staff_user(db, django_user_model):
    return django_user_model.objects.create_user(
        username="ops",
        email="ops@example.com",
        password="OpsPass!123",  # noqa: S106
        is_staff=True,
    )
