"""Connection state and fan-out for the realtime layer.

:class:`RealtimeHub` owns the presence registry of one server process and
keeps room membership in its transport. Every public coroutine runs under a
single ``asyncio.Lock`` so state changes and the emits that follow them happen
in arrival order, even though emitting awaits the transport.

Outbound events:
- ``user_status``: ``{userId, status}`` to every connection
- ``receive_message``: ``{room, message, senderId, senderName, timestamp}`` to
  the room, sender included
- ``user_typing`` / ``user_stop_typing``: ``{room, user}`` to the room, sender
  excluded
- ``notification``: ``{type, message, ...}`` to a private room or any room
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import UTC
from datetime import datetime
from typing import TYPE_CHECKING
from typing import Any

from .conf import RealtimeSettings
from .presence import PresenceRegistry
from .rooms import room_for_user

if TYPE_CHECKING:
    from .transport import Transport

logger = logging.getLogger(__name__)

EVENT_USER_STATUS = "user_status"
EVENT_RECEIVE_MESSAGE = "receive_message"
EVENT_USER_TYPING = "user_typing"
EVENT_USER_STOP_TYPING = "user_stop_typing"
EVENT_NOTIFICATION = "notification"

STATUS_ONLINE = "online"
STATUS_OFFLINE = "offline"


def server_timestamp() -> str:
    """Wall-clock UTC time in the ISO form browsers produce for ``Date``."""
    now = datetime.now(tz=UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RealtimeHub:
    def __init__(
        self,
        transport: Transport,
        config: RealtimeSettings | None = None,
    ) -> None:
        self.transport = transport
        self.config = config or RealtimeSettings()
        self.presence = PresenceRegistry()
        self._lock = asyncio.Lock()

    # -- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        self.presence.clear()
        self._lock = asyncio.Lock()

    def start(self) -> None:
        self.reset()
        logger.info("Realtime hub started")

    def shutdown(self) -> None:
        logger.info(
            "Realtime hub shutting down with %s open connections",
            self.presence.connection_count,
        )
        self.reset()

    def stats(self) -> dict[str, Any]:
        return {
            "connections": self.presence.connection_count,
            "online_users": len(self.presence),
        }

    def private_room(self, user_id: str) -> str:
        return room_for_user(user_id, self.config.private_room_prefix)

    # -- connection lifecycle ----------------------------------------------

    async def connect(self, conn_id: str, user_id: str) -> None:
        """Admit an authenticated connection."""
        if not user_id:
            msg = "Connections must carry an authenticated user id"
            raise ValueError(msg)
        async with self._lock:
            went_online = self.presence.register_connection(user_id, conn_id)
            await self.transport.enter_room(conn_id, self.private_room(user_id))
            logger.info("User %s connected with socket %s", user_id, conn_id)
            if went_online:
                await self.transport.emit(
                    EVENT_USER_STATUS,
                    {"userId": user_id, "status": STATUS_ONLINE},
                )

    async def disconnect(self, conn_id: str) -> None:
        """Forget a connection. The transport drops its room memberships."""
        async with self._lock:
            user_id = self.presence.unregister_connection(conn_id)
            logger.info("Socket %s disconnected", conn_id)
            if user_id is not None:
                await self.transport.emit(
                    EVENT_USER_STATUS,
                    {"userId": user_id, "status": STATUS_OFFLINE},
                )

    async def online_users(self) -> list[str]:
        async with self._lock:
            return self.presence.online_users()

    # -- rooms -------------------------------------------------------------

    def _room_accepted(self, room: Any) -> bool:
        if not isinstance(room, str) or not room:
            return False
        limit = self.config.max_room_name_length
        return limit is None or len(room) <= limit

    def _join_allowed(self, conn_id: str, room: str) -> bool:
        if not self.config.protect_private_rooms:
            return True
        if not room.startswith(self.config.private_room_prefix):
            return True
        user_id = self.presence.user_for(conn_id)
        return user_id is not None and room == self.private_room(user_id)

    async def join_room(self, conn_id: str, room: str) -> bool:
        if not self._room_accepted(room):
            logger.warning("Socket %s sent an invalid room name, ignoring", conn_id)
            return False
        async with self._lock:
            if self.presence.user_for(conn_id) is None:
                logger.warning("Ignoring join from unknown socket %s", conn_id)
                return False
            if not self._join_allowed(conn_id, room):
                logger.warning(
                    "Socket %s may not join private room %s",
                    conn_id,
                    room,
                )
                return False
            await self.transport.enter_room(conn_id, room)
        logger.info("Socket %s joined room %s", conn_id, room)
        return True

    async def leave_room(self, conn_id: str, room: str) -> bool:
        if not self._room_accepted(room):
            logger.warning("Socket %s sent an invalid room name, ignoring", conn_id)
            return False
        async with self._lock:
            if conn_id not in self.transport.participants(room):
                return False
            await self.transport.leave_room(conn_id, room)
        logger.info("Socket %s left room %s", conn_id, room)
        return True

    # -- fan-out -----------------------------------------------------------

    async def _broadcast(
        self,
        event: str,
        payload: dict[str, Any],
        room: str,
        skip_sid: str | None = None,
    ) -> int:
        # Returns how many connections the event was handed to.
        recipients = self.transport.participants(room)
        recipients.discard(skip_sid)
        if not recipients:
            return 0
        await self.transport.emit(event, payload, room=room, skip_sid=skip_sid)
        return len(recipients)

    async def send_message(
        self,
        room: str,
        message: Any,
        sender_id: Any,
        sender_name: Any,
    ) -> int:
        """Broadcast a chat message to everyone in ``room``, sender included.

        The sender does not have to be a member of the room. Returns the
        number of connections the message was handed to.
        """
        if not self._room_accepted(room):
            logger.warning("Dropping chat message with an invalid room")
            return 0
        limit = self.config.max_message_length
        if limit is not None and isinstance(message, str) and len(message) > limit:
            logger.warning("Dropping chat message to %s over %s chars", room, limit)
            return 0

        async with self._lock:
            payload = {
                "room": room,
                "message": message,
                "senderId": sender_id,
                "senderName": sender_name,
                "timestamp": server_timestamp(),
            }
            return await self._broadcast(EVENT_RECEIVE_MESSAGE, payload, room)

    async def _relay_typing(
        self,
        event: str,
        conn_id: str,
        room: str,
        user: Any,
    ) -> int:
        if not self._room_accepted(room):
            logger.warning("Socket %s sent typing for an invalid room", conn_id)
            return 0
        async with self._lock:
            return await self._broadcast(
                event,
                {"room": room, "user": user},
                room,
                skip_sid=conn_id,
            )

    async def set_typing(self, conn_id: str, room: str, user: Any) -> int:
        return await self._relay_typing(EVENT_USER_TYPING, conn_id, room, user)

    async def clear_typing(self, conn_id: str, room: str, user: Any) -> int:
        return await self._relay_typing(EVENT_USER_STOP_TYPING, conn_id, room, user)

    # -- notifications -----------------------------------------------------

    async def notify_room(self, room: str, notification: Mapping[str, Any]) -> int:
        """Push a notification to every connection in ``room``.

        Nobody listening is not an error: the notification is dropped.
        """
        if not self._room_accepted(room):
            logger.warning("Dropping notification with an invalid room")
            return 0
        async with self._lock:
            delivered = await self._broadcast(
                EVENT_NOTIFICATION,
                dict(notification),
                room,
            )
        if not delivered:
            logger.debug("Notification for room %s had no recipients", room)
        return delivered

    async def notify_user(self, user_id: Any, notification: Mapping[str, Any]) -> int:
        """Push a notification to every open connection of ``user_id``."""
        return await self.notify_room(self.private_room(str(user_id)), notification)
