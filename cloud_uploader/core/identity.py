"""Caller identification from signed request credentials."""

from __future__ import annotations

from fastapi import Request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from cloud_uploader.core.config import Settings

SESSION_COOKIE = "__session"
_TOKEN_SALT = "cloud-uploader.identity"


class IdentityGate:
    """Resolve the caller identity carried by a request, if any.

    Callers present a token signed with ``Settings.auth_secret`` either as an
    ``Authorization: Bearer`` header or in the ``__session`` cookie. Only the
    headers and cookies are inspected; the request body is never touched.
    """

    def __init__(self, settings: Settings) -> None:
        self._serializer = URLSafeTimedSerializer(settings.auth_secret, salt=_TOKEN_SALT)
        self._max_age = settings.auth_max_age

    def issue(self, user_id: str) -> str:
        """Sign a token identifying ``user_id``."""
        return self._serializer.dumps({"sub": user_id})

    def check(self, request: Request) -> str | None:
        token = _extract_token(request)
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except BadSignature:
            return None
        if not isinstance(data, dict):
            return None
        user_id = data.get("sub")
        return str(user_id) if user_id else None


def _extract_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if header:
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(SESSION_COOKIE)


__all__ = ["IdentityGate", "SESSION_COOKIE"]
