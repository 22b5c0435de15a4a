from __future__ import annotations


class RealtimeError(Exception):
    """Base class for errors raised by the realtime subsystem."""


class AuthenticationError(RealtimeError):
    reason = "Authentication error"


class AuthenticationMissing(AuthenticationError):
    """No credential was supplied with the handshake."""

    reason = "Authentication error: Token required"


class AuthenticationInvalid(AuthenticationError):
    """A credential was supplied but failed verification."""

    def __init__(self, message: str = "Invalid token", *, expired: bool = False):
        super().__init__(message)
        self.expired = expired

    @property
    def reason(self) -> str:  # type: ignore[override]
        if self.expired:
            return "Authentication error: Token expired"
        return "Authentication error: Invalid token"


class InvalidEventPayload(RealtimeError):
    """A client event carried a payload of the wrong shape."""
