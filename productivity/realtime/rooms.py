"""Room naming for realtime connections.

Membership itself lives in the Socket.IO client manager; a room is just the
set of connections that entered a name and it vanishes with its last member.
"""

from __future__ import annotations

from .conf import DEFAULT_PRIVATE_ROOM_PREFIX


def room_for_user(user_id: str, prefix: str = DEFAULT_PRIVATE_ROOM_PREFIX) -> str:
    """Return the private notification room of ``user_id``."""
    return f"{prefix}{user_id}"
