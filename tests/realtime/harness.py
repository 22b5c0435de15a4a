from __future__ import annotations

import json
from collections import defaultdict
from typing import Any

import socketio
from asgiref.sync import async_to_sync
from socketio import exceptions as socketio_exceptions

from productivity.realtime import socketio as realtime_socketio

# Socket.IO EVENT packets on the default namespace: "2" followed by a JSON
# array of [event, *args].
EVENT_PACKET = "2"


def decode_event(encoded: Any) -> tuple[str, Any] | None:
    if isinstance(encoded, bytes):
        encoded = encoded.decode()
    if not isinstance(encoded, str) or not encoded.startswith(EVENT_PACKET):
        return None
    event, *args = json.loads(encoded[len(EVENT_PACKET) :])
    return event, args[0] if args else None


class ServerHarness:
    """Runs the module-level Socket.IO server without a network.

    Clients are registered with the server's real client manager and the
    handlers run unchanged; only the final Engine.IO write and the session
    store are replaced. Frames are recorded per Engine.IO socket.
    """

    def __init__(self, monkeypatch) -> None:
        self.server = realtime_socketio.sio
        self.hub = realtime_socketio.hub
        self.frames: dict[str, list[tuple[str, Any]]] = defaultdict(list)
        self.sessions: dict[str, dict] = {}
        self._eio_sids: dict[str, str] = {}

        manager = socketio.AsyncManager()
        manager.set_server(self.server)
        monkeypatch.setattr(self.server, "manager", manager)
        monkeypatch.setattr(self.server.eio, "send", self._send)
        monkeypatch.setattr(
            self.server.eio,
            "send_packet",
            self._send_packet,
            raising=False,
        )
        monkeypatch.setattr(self.server, "save_session", self._save_session)
        monkeypatch.setattr(self.server, "get_session", self._get_session)

    # -- engine.io / session stand-ins --------------------------------------

    async def _send(self, eio_sid: str, data: Any) -> None:
        self._record(eio_sid, data)

    async def _send_packet(self, eio_sid: str, pkt: Any) -> None:
        self._record(eio_sid, pkt.data)

    def _record(self, eio_sid: str, data: Any) -> None:
        decoded = decode_event(data)
        if decoded is not None:
            self.frames[eio_sid].append(decoded)

    async def _save_session(self, sid, session, namespace=None) -> None:
        self.sessions[sid] = session

    async def _get_session(self, sid, namespace=None) -> dict:
        return self.sessions.get(sid, {})

    # -- client actions -----------------------------------------------------

    def connect(
        self,
        eio_sid: str,
        *,
        auth: Any = None,
        environ: dict | None = None,
    ) -> str:
        """Open a connection the way ``AsyncServer`` does for a handshake."""

        async def _connect() -> str:
            sid = await self.server.manager.connect(eio_sid, "/")
            try:
                await realtime_socketio.connect(sid, environ or {}, auth)
            except socketio_exceptions.ConnectionRefusedError:
                await self.server.manager.disconnect(sid, "/")
                raise
            return sid

        sid = async_to_sync(_connect)()
        self._eio_sids[sid] = eio_sid
        return sid

    def disconnect(self, sid: str) -> None:
        async def _disconnect() -> None:
            await realtime_socketio.disconnect(sid, "client disconnect")
            await self.server.manager.disconnect(sid, "/")

        async_to_sync(_disconnect)()

    def emit(self, sid: str, event: str, data: Any) -> None:
        async_to_sync(getattr(realtime_socketio, event))(sid, data)

    # -- observations -------------------------------------------------------

    def received(self, sid: str, event: str | None = None) -> list[Any]:
        return [
            data
            for name, data in self.frames[self._eio_sids[sid]]
            if event is None or name == event
        ]

    def participants(self, room: str) -> set[str]:
        return self.hub.transport.participants(room)

    def rooms_for(self, sid: str) -> set[str]:
        rooms = self.server.rooms(sid)
        return {room for room in rooms if room != sid}

    def clear(self) -> None:
        self.frames.clear()
