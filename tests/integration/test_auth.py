"""Integration tests for JWT authentication.

Validates:
  - /health is public (plain Django view, no DRF).
  - Token obtain returns a pair whose access token carries the role.
  - Inactive users cannot obtain tokens.
  - Protected DRF endpoints return 401 without a valid token.
"""

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from modules.accounts.constants import UserRole

pytestmark = pytest.mark.integration

TOKEN_URL = "/api/v1/auth/token/"


class TestPublicEndpoints:
    """Health check must remain accessible without credentials."""

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"


class TestTokenObtain:
    def test_token_carries_role_claim(self, api_client, make_user):
        make_user(UserRole.CONFERENTE, username="ana")
        response = api_client.post(
            TOKEN_URL, {"username": "ana", "password": "testpass123"}, format="json"
        )

        assert response.status_code == 200
        token = AccessToken(response.data["access"])
        assert token["role"] == UserRole.CONFERENTE
        assert token["username"] == "ana"
        assert "refresh" in response.data

    def test_wrong_password_returns_401(self, api_client, make_user):
        make_user(username="ana")
        response = api_client.post(
            TOKEN_URL, {"username": "ana", "password": "nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.data["type"] == "not_authenticated"

    def test_inactive_user_cannot_login(self, api_client, make_user):
        make_user(username="ana", is_active=False)
        response = api_client.post(
            TOKEN_URL, {"username": "ana", "password": "testpass123"}, format="json"
        )
        assert response.status_code == 401

    def test_token_grants_access(self, api_client, make_user):
        make_user(UserRole.GERENTE, username="chefe")
        tokens = api_client.post(
            TOKEN_URL, {"username": "chefe", "password": "testpass123"}, format="json"
        ).data

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 200
        assert response.data["role"] == UserRole.GERENTE

    def test_deactivated_user_token_is_rejected(self, api_client, make_user):
        user = make_user(username="ana")
        tokens = api_client.post(
            TOKEN_URL, {"username": "ana", "password": "testpass123"}, format="json"
        ).data
        user.is_active = False
        user.save()

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        assert api_client.get("/api/v1/me").status_code == 401


class TestProtectedEndpoints:
    """All DRF endpoints require a valid JWT by default (Fail Closed)."""

    def test_no_token_returns_401(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_malformed_auth_header_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Token some-token")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_empty_bearer_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer ")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401
        assert "Bearer" in response.get("WWW-Authenticate", "")
