"""
Auth Gate Tests

Tests for the gate function and the middleware that applies it.
"""

import time

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from app.core.config import settings
from app.core.errors import AuthReason, Fault
from app.core.security import create_access_token
from app.middleware.auth import Allow, AuthGateMiddleware, Deny, authorize, is_protected_path
from app.schemas.token import UserAuthInfo


IDENTITY = UserAuthInfo(
    id="6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f",
    public_id=4821937,
    email="maria@example.com",
    user_type="customer",
)


def _bearer(token: str) -> Headers:
    return Headers({"Authorization": f"Bearer {token}"})


class TestAuthorize:
    """Tests for the gate decision function."""

    def test_allows_valid_token(self):
        decision = authorize(_bearer(create_access_token(IDENTITY)))

        assert isinstance(decision, Allow)
        assert decision.claims.email == IDENTITY.email

    def test_denies_missing_header(self):
        decision = authorize(Headers({}))

        assert isinstance(decision, Deny)
        assert decision.error.reason is AuthReason.MISSING_OR_MALFORMED_TOKEN

    def test_denies_bad_signature(self, make_token):
        decision = authorize(_bearer(make_token(secret="another-secret")))

        assert isinstance(decision, Deny)
        assert decision.error.reason is AuthReason.INVALID_AUTHORIZATION_TOKEN

    def test_denies_semantically_invalid_claims(self, make_token):
        """Verify a correctly signed token with bad claims reports every violation."""
        decision = authorize(_bearer(make_token(id="", email="")))

        assert isinstance(decision, Deny)
        assert decision.error.reason is AuthReason.MULTIPLE_AUTHORIZATION_ERRORS
        assert decision.error.violations == ("Invalid ID", "Invalid E-mail")

    def test_expiry_is_checked_at_validation_time(self):
        """Verify a signature-valid token is denied once validation time reaches exp."""
        t0 = int(time.time())
        headers = _bearer(create_access_token(IDENTITY, now=t0))

        assert isinstance(authorize(headers, now=t0 + 3599), Allow)

        decision = authorize(headers, now=t0 + 3600)
        assert isinstance(decision, Deny)
        assert decision.error.violations == ("Expired token",)

    def test_expired_token_reports_every_violation(self, make_token):
        """Verify an expired token is aggregated with its other claim violations."""
        token = make_token(id="", email="", exp=int(time.time()) - 10)

        decision = authorize(_bearer(token))

        assert isinstance(decision, Deny)
        assert decision.error.reason is AuthReason.MULTIPLE_AUTHORIZATION_ERRORS
        assert decision.error.violations == ("Invalid ID", "Invalid E-mail", "Expired token")

    def test_expiry_follows_given_time(self, make_token):
        """Verify a token past exp on the wall clock passes for an earlier time."""
        t = int(time.time())
        token = make_token(exp=t - 5)

        assert isinstance(authorize(_bearer(token), now=t - 100), Allow)

    def test_missing_secret_denies_with_config_fault(self, monkeypatch, make_token):
        token = make_token()
        monkeypatch.setattr(settings, "JWT_SECRET", None)

        decision = authorize(_bearer(token))

        assert isinstance(decision, Deny)
        assert decision.error.kind is Fault.CONFIG
        assert decision.to_response().status_code == 503

    def test_header_checked_before_secret(self, monkeypatch):
        """Verify a missing header is an auth fault even without a secret."""
        monkeypatch.setattr(settings, "JWT_SECRET", None)

        decision = authorize(Headers({}))

        assert isinstance(decision, Deny)
        assert decision.error.kind is Fault.AUTH


class TestIsProtectedPath:

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/protected", True),
            ("/api/protected/", True),
            ("/api/protected/nested", True),
            ("/api/protectedness", False),
            ("/api/common", False),
        ],
    )
    def test_prefix_matching(self, path, expected):
        assert is_protected_path(path, ["/api/protected"]) is expected


@pytest.fixture
def gated_app():
    """Small app with one gated and one open route that count their calls."""
    calls = {"secret": 0, "open": 0}
    test_app = FastAPI()
    test_app.add_middleware(AuthGateMiddleware, protected_paths=["/secret"])

    @test_app.get("/secret")
    async def secret(request: Request) -> dict:
        calls["secret"] += 1
        return {"email": request.state.claims.email}

    @test_app.get("/open")
    async def open_route() -> dict:
        calls["open"] += 1
        return {"ok": True}

    return TestClient(test_app), calls


class TestAuthGateMiddleware:
    """Tests for AuthGateMiddleware."""

    def test_missing_header_short_circuits(self, gated_app):
        """Verify denied requests never reach the handler."""
        client, calls = gated_app

        response = client.get("/secret")

        assert response.status_code == 401
        assert response.json() == "Missing or malformed authorization header"
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert calls["secret"] == 0

    def test_invalid_token_short_circuits(self, gated_app, make_token):
        client, calls = gated_app

        response = client.get(
            "/secret",
            headers={"Authorization": f"Bearer {make_token(secret='another-secret')}"},
        )

        assert response.status_code == 401
        assert response.json() == "Invalid authorization token"
        assert calls["secret"] == 0

    def test_aggregated_violations_in_body(self, gated_app, make_token):
        client, calls = gated_app

        response = client.get(
            "/secret",
            headers={"Authorization": f"Bearer {make_token(id='', email='')}"},
        )

        assert response.status_code == 401
        assert response.json() == (
            "Multiple errors while validating the authorization token: "
            '["Invalid ID", "Invalid E-mail"]'
        )
        assert calls["secret"] == 0

    def test_expired_token_with_bad_claims_lists_all_violations(self, gated_app, make_token):
        client, calls = gated_app
        token = make_token(id="", email="", exp=int(time.time()) - 10)

        response = client.get("/secret", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == (
            "Multiple errors while validating the authorization token: "
            '["Invalid ID", "Invalid E-mail", "Expired token"]'
        )
        assert calls["secret"] == 0

    def test_valid_token_reaches_handler_with_claims(self, gated_app):
        """Verify allowed requests see the verified claims on request.state."""
        client, calls = gated_app
        token = create_access_token(IDENTITY)

        response = client.get("/secret", headers={"Authorization": f"Bearer  {token}"})

        assert response.status_code == 200
        assert response.json() == {"email": IDENTITY.email}
        assert calls["secret"] == 1

    def test_missing_secret_returns_503(self, gated_app, make_token, monkeypatch):
        client, calls = gated_app
        token = make_token()
        monkeypatch.setattr(settings, "JWT_SECRET", None)

        response = client.get("/secret", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 503
        assert calls["secret"] == 0

    def test_unprotected_route_is_not_gated(self, gated_app):
        client, calls = gated_app

        response = client.get("/open")

        assert response.status_code == 200
        assert calls["open"] == 1
