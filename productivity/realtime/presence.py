from __future__ import annotations


class PresenceRegistry:
    """Maps each online user to the set of connections they have open.

    A user is present if and only if at least one of their connections is open.
    Only the first connection appearing and the last one disappearing are
    reported back to the caller as transitions.
    """

    def __init__(self) -> None:
        self._connections: dict[str, set[str]] = {}
        self._owners: dict[str, str] = {}

    def register_connection(self, user_id: str, conn_id: str) -> bool:
        """Record ``conn_id`` for ``user_id``.

        Returns True when this made the user go online.
        """
        owner = self._owners.get(conn_id)
        if owner is not None:
            if owner != user_id:
                msg = f"Connection {conn_id} is already registered to another user"
                raise ValueError(msg)
            return False
        conns = self._connections.get(user_id)
        went_online = conns is None
        if conns is None:
            conns = self._connections[user_id] = set()
        conns.add(conn_id)
        self._owners[conn_id] = user_id
        return went_online

    def unregister_connection(self, conn_id: str) -> str | None:
        """Forget ``conn_id``.

        Returns the owning user id if that was their last connection, else None.
        """
        user_id = self._owners.pop(conn_id, None)
        if user_id is None:
            return None
        conns = self._connections.get(user_id)
        if conns is None:
            return None
        conns.discard(conn_id)
        if conns:
            return None
        del self._connections[user_id]
        return user_id

    def user_for(self, conn_id: str) -> str | None:
        return self._owners.get(conn_id)

    def connections_for(self, user_id: str) -> set[str]:
        return set(self._connections.get(user_id, ()))

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def online_users(self) -> list[str]:
        return sorted(self._connections)

    @property
    def connection_count(self) -> int:
        return len(self._owners)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._connections

    def clear(self) -> None:
        self._connections.clear()
        self._owners.clear()
