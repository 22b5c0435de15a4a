from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

from productivity.realtime.socketio import hub

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Mapping


def build_notification_payload(
    notification_type: str,
    message: str,
    data: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = dict(data or {})
    payload["type"] = notification_type
    payload["message"] = message
    return payload


def publish_user_notification(
    user_id: Any,
    notification_type: str,
    message: str,
    data: Mapping[str, Any] | None = None,
) -> int:
    """Push a notification to every open connection of ``user_id``.

    Safe to call from sync Django code (signals, views). If the user is not
    connected, this is a no-op and returns 0.
    """

    payload = build_notification_payload(notification_type, message, data)
    return async_to_sync(hub.notify_user)(user_id, payload)


def publish_room_notification(
    room: str,
    notification_type: str,
    message: str,
    data: Mapping[str, Any] | None = None,
) -> int:
    """Push a notification to every connection in ``room`` from sync code."""

    payload = build_notification_payload(notification_type, message, data)
    return async_to_sync(hub.notify_room)(room, payload)
