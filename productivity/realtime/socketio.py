"""Global Socket.IO server for chat, presence and notifications.

Frontend convention:
- URL base: ws://<host>:8000
- Socket.IO path: /ws/chat/ (``REALTIME_SOCKETIO_PATH``)
- Auth: ``auth: { token }`` (JWT access token), an ``Authorization: Bearer``
  header, or ``query.token``

Handlers only translate events into :class:`RealtimeHub` calls. Client events
are fire-and-forget: nothing is acknowledged and malformed payloads are
dropped with a warning.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from socketio import exceptions as socketio_exceptions

from .auth import JWTTokenVerifier
from .auth import authenticate
from .conf import RealtimeSettings
from .exceptions import AuthenticationError
from .exceptions import InvalidEventPayload
from .hub import RealtimeHub
from .transport import SocketIOTransport

logger = logging.getLogger(__name__)

SERVER_ERROR_REASON = "Authentication error: Server error"

realtime_settings = RealtimeSettings.from_django()

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=realtime_settings.cors_allowed_origins,
    # Handle each client's events one at a time, in arrival order.
    async_handlers=False,
    logger=False,
    engineio_logger=False,
)

hub = RealtimeHub(SocketIOTransport(sio), realtime_settings)
verifier = JWTTokenVerifier(
    require_active_user=realtime_settings.require_active_user,
)


def _room_from(data: Any) -> str:
    # Clients send the bare room name; `{room}` is tolerated as well.
    if isinstance(data, dict):
        data = data.get("room")
    if not isinstance(data, str) or not data:
        msg = "Expected a room name"
        raise InvalidEventPayload(msg)
    return data


def _fields_from(data: Any, *names: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = f"Expected an object with {', '.join(names)}"
        raise InvalidEventPayload(msg)
    return {name: data.get(name) for name in names}


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    # `auth` may be omitted depending on the client/transport.
    try:
        user_id = await authenticate(environ, auth, verifier)
    except AuthenticationError as exc:
        logger.info("Socket %s refused: %s", sid, exc.reason)
        raise socketio_exceptions.ConnectionRefusedError(exc.reason) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        raise socketio_exceptions.ConnectionRefusedError(SERVER_ERROR_REASON) from exc

    await sio.save_session(sid, {"user_id": user_id})
    await hub.connect(sid, user_id)


@sio.event
async def disconnect(sid: str, reason: Any = None):
    await hub.disconnect(sid)


@sio.event
async def join_room(sid: str, data: Any):
    try:
        room = _room_from(data)
    except InvalidEventPayload as exc:
        logger.warning("Dropping join_room from %s: %s", sid, exc)
        return
    await hub.join_room(sid, room)


@sio.event
async def leave_room(sid: str, data: Any):
    try:
        room = _room_from(data)
    except InvalidEventPayload as exc:
        logger.warning("Dropping leave_room from %s: %s", sid, exc)
        return
    await hub.leave_room(sid, room)


@sio.event
async def send_message(sid: str, data: Any):
    try:
        fields = _fields_from(data, "room", "message", "senderId", "senderName")
    except InvalidEventPayload as exc:
        logger.warning("Dropping send_message from %s: %s", sid, exc)
        return

    sender_id = fields["senderId"]
    if sender_id is None:
        session = await sio.get_session(sid)
        sender_id = session.get("user_id") if isinstance(session, dict) else None

    await hub.send_message(
        fields["room"],
        fields["message"],
        sender_id,
        fields["senderName"],
    )


@sio.event
async def typing(sid: str, data: Any):
    try:
        fields = _fields_from(data, "room", "user")
    except InvalidEventPayload as exc:
        logger.warning("Dropping typing from %s: %s", sid, exc)
        return
    await hub.set_typing(sid, fields["room"], fields["user"])


@sio.event
async def stop_typing(sid: str, data: Any):
    try:
        fields = _fields_from(data, "room", "user")
    except InvalidEventPayload as exc:
        logger.warning("Dropping stop_typing from %s: %s", sid, exc)
        return
    await hub.clear_typing(sid, fields["room"], fields["user"])
