"""Handshake authentication for realtime connections.

Clients present an access token in one of these places, checked in order:
- the Socket.IO ``auth`` payload: ``auth: { token }``
- an ``Authorization: Bearer <token>`` header
- a ``token`` query string parameter (long-polling clients that cannot set
  headers)
"""

from __future__ import annotations

from typing import Any
from typing import Protocol
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.state import token_backend
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.utils import aware_utcnow
from rest_framework_simplejwt.utils import datetime_from_epoch

from .exceptions import AuthenticationInvalid
from .exceptions import AuthenticationMissing


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> str:
        """Return the user id carried by ``token`` or raise AuthenticationInvalid."""


def _scope_from_environ(environ: Any) -> Any:
    # python-socketio passes different shapes depending on async mode:
    # - ASGI: a WSGI-style environ that also carries the raw `asgi.scope`
    # - WSGI: a plain WSGI environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            return inner
    return environ


def _bearer_from_header(value: str | bytes | None) -> str | None:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode(errors="ignore")
    if not isinstance(value, str):
        return None
    parts = value.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":  # noqa: PLR2004
        return None
    return parts[1]


def _authorization_header(environ: Any) -> str | bytes | None:
    if not isinstance(environ, dict):
        return None
    header = environ.get("HTTP_AUTHORIZATION")
    if header:
        return header
    scope = _scope_from_environ(environ)
    if isinstance(scope, dict):
        for name, value in scope.get("headers") or ():
            if name.lower() == b"authorization":
                return value
    return None


def _query_token(environ: Any) -> str | None:
    scope = _scope_from_environ(environ)
    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(environ, dict) and "QUERY_STRING" in environ:
        query_string = environ.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    return token or None


def extract_token(environ: Any, auth: Any | None) -> str | None:
    """Extract the bearer credential from a Socket.IO handshake."""

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    header_token = _bearer_from_header(_authorization_header(environ))
    if header_token:
        return header_token

    return _query_token(environ)


def _has_expired(token: str) -> bool:
    # Reads `exp` without checking the signature; only used to word the refusal.
    try:
        payload = token_backend.decode(token, verify=False)
    except TokenBackendError:
        return False
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return False
    return datetime_from_epoch(exp) <= aware_utcnow()


@database_sync_to_async
def _ensure_active_user(validated: AccessToken) -> None:
    try:
        JWTAuthentication().get_user(validated)
    except AuthenticationFailed as exc:  # user not found / inactive
        raise AuthenticationInvalid(str(exc.detail)) from exc
    except ValueError as exc:  # claim does not fit the primary key type
        msg = "User not found"
        raise AuthenticationInvalid(msg) from exc


class JWTTokenVerifier:
    """Verify SimpleJWT access tokens.

    Verification is stateless by default: a token with a valid signature,
    a future expiry and a user id claim is enough. With
    ``require_active_user`` the user must also exist and be active.
    """

    def __init__(self, *, require_active_user: bool = False) -> None:
        self.require_active_user = require_active_user

    async def verify(self, token: str) -> str:
        try:
            validated = AccessToken(token)
        except TokenError as exc:
            raise AuthenticationInvalid(str(exc), expired=_has_expired(token)) from exc

        user_id = validated.get(api_settings.USER_ID_CLAIM)
        if user_id is None or user_id == "":
            msg = "Token contained no recognizable user identification"
            raise AuthenticationInvalid(msg)

        if self.require_active_user:
            await _ensure_active_user(validated)
        return str(user_id)


async def authenticate(environ: Any, auth: Any | None, verifier: TokenVerifier) -> str:
    """Gate a connection attempt. Returns the authenticated user id."""

    token = extract_token(environ, auth)
    if not token:
        raise AuthenticationMissing
    return await verifier.verify(token)
