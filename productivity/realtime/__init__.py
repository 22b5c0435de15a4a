"""Realtime infrastructure (Socket.IO presence, rooms, chat, notifications).

The Socket.IO server lives in :mod:`productivity.realtime.socketio`; the state it
drives (presence registry, room membership, fan-out) lives in
:mod:`productivity.realtime.hub` so it can be exercised without a transport.
"""
