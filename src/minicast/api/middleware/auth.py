"""Session token middleware: resolves the requester's identity.

The identity provider issues HS256 JWTs whose ``sub`` is the wallet
address or namespaced external identity. The token is read from the
``Authorization: Bearer`` header or, for browser sessions, from the
session cookie. Routes enforce authentication themselves.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from minicast.config import settings
from minicast.logging_config import bind_identity

logger = logging.getLogger(__name__)


def decode_session_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as exc:
        logger.debug("JWT decode failed: %s", exc)
        raise ValueError(f"Invalid token: {exc}") from exc


def issue_session_token(identity: str, expires_in_minutes: int = 60) -> str:
    """Mint a session token; used by first-party login flows and tests."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": identity,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_in_minutes)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach ``request.state.identity`` (or None) and any auth error."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.identity = None
        request.state.auth_error = None

        auth_header = request.headers.get("authorization", "")
        token = None
        if auth_header.startswith("Bearer "):
            token = auth_header[7:].strip()
        elif settings.session_cookie_name in request.cookies:
            token = request.cookies[settings.session_cookie_name]

        if token:
            try:
                claims = decode_session_token(token)
            except ValueError:
                request.state.auth_error = "invalid_token"
            else:
                subject = (claims.get("sub") or "").strip().lower()
                request.state.identity = subject or None
                if subject:
                    bind_identity(subject)

        return await call_next(request)
