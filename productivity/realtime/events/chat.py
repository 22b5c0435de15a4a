from __future__ import annotations

from typing import Any

from asgiref.sync import async_to_sync

from productivity.realtime.socketio import hub


def publish_chat_message(
    room: str,
    message: str,
    sender_id: Any,
    sender_name: Any,
) -> int:
    """Broadcast a chat message from sync code, as if sent over the socket."""

    return async_to_sync(hub.send_message)(room, message, sender_id, sender_name)
