"""Broadcast primitive used by the hub.

Room membership belongs to the transport: for Socket.IO that is the server's
client manager, which also drops a connection from every room when it
disconnects. Delivery is fire-and-forget.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

if TYPE_CHECKING:
    import socketio


class Transport(Protocol):
    async def emit(
        self,
        event: str,
        data: dict[str, Any],
        room: str | None = None,
        skip_sid: str | None = None,
    ) -> None:
        """Send ``event`` to ``room`` (every connection if None), minus ``skip_sid``."""

    async def enter_room(self, conn_id: str, room: str) -> None: ...

    async def leave_room(self, conn_id: str, room: str) -> None: ...

    def participants(self, room: str) -> set[str]:
        """Connections currently in ``room``."""


class SocketIOTransport:
    def __init__(self, server: socketio.AsyncServer, namespace: str = "/") -> None:
        self.server = server
        self.namespace = namespace

    async def emit(
        self,
        event: str,
        data: dict[str, Any],
        room: str | None = None,
        skip_sid: str | None = None,
    ) -> None:
        await self.server.emit(
            event,
            data,
            room=room,
            skip_sid=skip_sid,
            namespace=self.namespace,
        )

    async def enter_room(self, conn_id: str, room: str) -> None:
        await self.server.enter_room(conn_id, room, namespace=self.namespace)

    async def leave_room(self, conn_id: str, room: str) -> None:
        await self.server.leave_room(conn_id, room, namespace=self.namespace)

    def participants(self, room: str) -> set[str]:
        manager = self.server.manager
        try:
            return {sid for sid, _ in manager.get_participants(self.namespace, room)}
        except KeyError:  # namespace or room not created yet
            return set()
