"""Authentication for the HTTP API and the notification stream.

Two mechanisms, each enabled only when configured:

- API key (``API_KEY``), sent as the ``X-Api-Key`` header or the ``apikey``
  query parameter, for scripts and companion apps.
- HTTP Basic auth (``AUTH_USERNAME`` and ``AUTH_PASSWORD``) for people.

A request passes if it satisfies either enabled mechanism. With neither
configured, every request passes through.
"""

import base64
import binascii
import secrets

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import HTTPConnection
from starlette.responses import Response

from app.core.config import Settings, get_settings

# Reachable without credentials (monitoring/docker health checks)
PUBLIC_PATHS = {"/api/health"}


def _matches(supplied: str, expected: str) -> bool:
    # Constant-time comparison to prevent timing attacks (using bytes)
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def _api_key_ok(conn: HTTPConnection, settings: Settings) -> bool:
    if settings.api_key is None:
        return False
    supplied = conn.headers.get("X-Api-Key") or conn.query_params.get("apikey")
    return supplied is not None and _matches(
        supplied, settings.api_key.get_secret_value()
    )


def _basic_auth_ok(conn: HTTPConnection, settings: Settings) -> bool:
    if not settings.auth_username or not settings.auth_password:
        return False

    auth_header = conn.headers.get("Authorization")
    if auth_header is None:
        return False

    try:
        scheme, credentials = auth_header.split(" ", 1)
        if scheme.lower() != "basic":
            return False
        decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
        username, password = decoded.split(":", 1)
    except (ValueError, binascii.Error):
        return False

    username_ok = _matches(username, settings.auth_username)
    password_ok = _matches(password, settings.auth_password.get_secret_value())
    return username_ok and password_ok


def _basic_enabled(settings: Settings) -> bool:
    return bool(settings.auth_username and settings.auth_password)


def is_authorized(conn: HTTPConnection) -> bool:
    """Check an HTTP request or websocket handshake against the configured auth.

    BaseHTTPMiddleware never sees websocket scopes, so websocket endpoints
    call this themselves before accepting.
    """
    settings = get_settings()
    if settings.api_key is None and not _basic_enabled(settings):
        return True
    if conn.url.path in PUBLIC_PATHS:
        return True
    return _api_key_ok(conn, settings) or _basic_auth_ok(conn, settings)


class ApiAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests lacking a valid API key or Basic credentials."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if is_authorized(request):
            return await call_next(request)
        return self._unauthorized(_basic_enabled(get_settings()))

    @staticmethod
    def _unauthorized(basic_enabled: bool) -> Response:
        headers = {"WWW-Authenticate": 'Basic realm="Seriesarr"'} if basic_enabled else {}
        return Response(content="Unauthorized", status_code=401, headers=headers)
