from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

DEFAULT_PRIVATE_ROOM_PREFIX = "user:"


@dataclass(frozen=True)
class RealtimeSettings:
    socketio_path: str = "ws/chat"
    cors_allowed_origins: str | list[str] = "*"
    private_room_prefix: str = DEFAULT_PRIVATE_ROOM_PREFIX
    # Hardening knobs. ``None`` / ``False`` keep the pass-through behaviour.
    max_room_name_length: int | None = None
    max_message_length: int | None = None
    protect_private_rooms: bool = False
    require_active_user: bool = False

    @classmethod
    def from_django(cls) -> RealtimeSettings:
        return cls(
            socketio_path=getattr(
                settings, "REALTIME_SOCKETIO_PATH", cls.socketio_path
            ),
            cors_allowed_origins=getattr(
                settings, "REALTIME_CORS_ALLOWED_ORIGINS", cls.cors_allowed_origins
            ),
            private_room_prefix=getattr(
                settings, "REALTIME_PRIVATE_ROOM_PREFIX", cls.private_room_prefix
            ),
            max_room_name_length=getattr(
                settings, "REALTIME_MAX_ROOM_NAME_LENGTH", cls.max_room_name_length
            ),
            max_message_length=getattr(
                settings, "REALTIME_MAX_MESSAGE_LENGTH", cls.max_message_length
            ),
            protect_private_rooms=getattr(
                settings, "REALTIME_PROTECT_PRIVATE_ROOMS", cls.protect_private_rooms
            ),
            require_active_user=getattr(
                settings, "REALTIME_REQUIRE_ACTIVE_USER", cls.require_active_user
            ),
        )
