"""
Integration tests for the authentication API endpoints.

Covers:
  POST /api/v1/auth/register
  POST /api/v1/auth/login
  POST /api/v1/auth/refresh
  POST /api/v1/auth/logout
  GET  /api/v1/auth/me
"""

from __future__ import annotations

import uuid

from httpx import AsyncClient

from social_tracker.core.security import create_access_token, create_refresh_token


# ---------------------------------------------------------------------------
# POST /api/v1/auth/register
# ---------------------------------------------------------------------------
class TestRegister:
    async def test_valid_registration_returns_tokens(self, async_client: AsyncClient):
        payload = {
            "email": f"newuser_{uuid.uuid4().hex[:8]}@example.com",
            "password": "Password1",
            "full_name": "New User",
            "timezone": "America/New_York",
        }
        response = await async_client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"

        me = await async_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["timezone"] == "America/New_York"

    async def test_duplicate_email_returns_400(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": test_user.email, "password": "Password1", "full_name": "Dup User"},
        )
        assert response.status_code == 400
        assert "already registered" in response.json()["detail"].lower()

    async def test_invalid_email_returns_422(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "not-an-email", "password": "Password1", "full_name": "User"},
        )
        assert response.status_code == 422

    async def test_short_password_returns_422(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/register",
            json={"email": "short@example.com", "password": "abc", "full_name": "User"},
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# POST /api/v1/auth/login
# ---------------------------------------------------------------------------
class TestLogin:
    async def test_valid_credentials(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "Password1"},
        )
        assert response.status_code == 200
        assert "access_token" in response.json()

    async def test_email_is_case_insensitive(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email.upper(), "password": "Password1"},
        )
        assert response.status_code == 200

    async def test_wrong_password_returns_401(self, async_client: AsyncClient, test_user):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "WrongPassword"},
        )
        assert response.status_code == 401

    async def test_unknown_email_returns_401(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "Password1"},
        )
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# POST /api/v1/auth/refresh
# ---------------------------------------------------------------------------
class TestRefresh:
    async def test_refresh_rotates_token(self, async_client: AsyncClient, test_user):
        refresh_token = create_refresh_token(data={"sub": str(test_user.id)})

        response = await async_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["refresh_token"] != refresh_token
        assert data["expires_in"] > 0

        reused = await async_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
        )
        assert reused.status_code == 401

    async def test_access_token_cannot_refresh(self, async_client: AsyncClient, test_user):
        access_token = create_access_token(data={"sub": str(test_user.id)})
        response = await async_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": access_token}
        )
        assert response.status_code == 401

    async def test_garbage_token_returns_401(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"}
        )
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# POST /api/v1/auth/logout and GET /api/v1/auth/me
# ---------------------------------------------------------------------------
class TestLogoutAndMe:
    async def test_me_requires_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/auth/me")
        assert response.status_code == 401

    async def test_me_returns_profile(self, async_client: AsyncClient, test_user, auth_headers):
        response = await async_client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user.email
        assert data["full_name"] == "Test Tracker"
        assert "password_hash" not in data

    async def test_logout_invalidates_tokens(self, async_client: AsyncClient, test_user, auth_headers):
        refresh_token = create_refresh_token(data={"sub": str(test_user.id)})

        response = await async_client.post(
            "/api/v1/auth/logout", headers=auth_headers, json={"refresh_token": refresh_token}
        )
        assert response.status_code == 200

        me = await async_client.get("/api/v1/auth/me", headers=auth_headers)
        assert me.status_code == 401

        refresh = await async_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": refresh_token}
        )
        assert refresh.status_code == 401

    async def test_request_id_header_echoed(self, async_client: AsyncClient):
        response = await async_client.get("/healthz", headers={"X-Request-ID": "abc123"})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "abc123"
