"""Tests for signed-token caller identification."""

from __future__ import annotations

from starlette.requests import Request

from cloud_uploader.core.config import Settings
from cloud_uploader.core.identity import SESSION_COOKIE, IdentityGate


def _request(headers: dict[str, str] | None = None) -> Request:
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/image-upload",
        "headers": raw_headers,
        "query_string": b"",
    }
    return Request(scope)


def _gate(**overrides: object) -> IdentityGate:
    return IdentityGate(Settings(auth_secret="test-secret", **overrides))


def test_check_accepts_bearer_token():
    gate = _gate()
    token = gate.issue("user_42")

    assert gate.check(_request({"Authorization": f"Bearer {token}"})) == "user_42"


def test_check_accepts_session_cookie():
    gate = _gate()
    token = gate.issue("user_7")

    assert gate.check(_request({"Cookie": f"{SESSION_COOKIE}={token}"})) == "user_7"


def test_check_without_credentials_is_unauthenticated():
    assert _gate().check(_request()) is None


def test_check_rejects_token_signed_with_other_secret():
    foreign = IdentityGate(Settings(auth_secret="someone-else")).issue("user_42")

    assert _gate().check(_request({"Authorization": f"Bearer {foreign}"})) is None


def test_check_rejects_expired_token():
    gate = _gate(auth_max_age=-1)
    token = gate.issue("user_42")

    assert gate.check(_request({"Authorization": f"Bearer {token}"})) is None


def test_check_ignores_non_bearer_schemes():
    gate = _gate()
    token = gate.issue("user_42")

    assert gate.check(_request({"Authorization": f"Basic {token}"})) is None
