from http import HTTPStatus

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def room_members(live_hub):
    async_to_sync(live_hub.connect)("s1", "bob")
    async_to_sync(live_hub.connect)("s2", "carol")
    async_to_sync(live_hub.join_room)("s1", "team-x")
    return live_hub


def test_post_message_broadcasts_to_room(api_client, user, room_members, transport):
    transport.clear()
    resp = api_client.post(
        reverse("api_v1:chat:message"),
        {"room": "team-x", "message": "from http"},
        format="json",
    )

    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"detail": "Message sent.", "room": "team-x", "delivered": 1}
    [payload] = transport.events_for("s1", "receive_message")
    assert payload["message"] == "from http"
    assert payload["senderId"] == str(user.pk)
    assert payload["senderName"] == "alice"
    assert transport.events_for("s2", "receive_message") == []


def test_post_message_to_empty_room(api_client, live_hub):
    resp = api_client.post(
        reverse("api_v1:chat:message"),
        {"room": "nobody", "message": "hello?"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["delivered"] == 0


def test_post_message_requires_room_and_message(api_client, live_hub):
    resp = api_client.post(reverse("api_v1:chat:message"), {}, format="json")
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert set(resp.json()) == {"room", "message"}


def test_post_message_respects_length_cap(api_client, live_hub, settings):
    settings.REALTIME_MAX_MESSAGE_LENGTH = 5
    resp = api_client.post(
        reverse("api_v1:chat:message"),
        {"room": "team-x", "message": "far too long"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST
    assert "message" in resp.json()


def test_post_message_requires_authentication(live_hub):
    resp = APIClient().post(
        reverse("api_v1:chat:message"),
        {"room": "team-x", "message": "hi"},
        format="json",
    )
    assert resp.status_code == HTTPStatus.UNAUTHORIZED


def test_history_is_empty(api_client):
    resp = api_client.get(reverse("api_v1:chat:history", args=["team-x"]))

    assert resp.status_code == HTTPStatus.OK
    assert resp.json() == {"room": "team-x", "messages": []}


def test_history_requires_authentication():
    resp = APIClient().get(reverse("api_v1:chat:history", args=["team-x"]))
    assert resp.status_code == HTTPStatus.UNAUTHORIZED
