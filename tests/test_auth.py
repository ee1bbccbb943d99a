# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Password hashing, session tokens, and the /auth endpoints.
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cafe_api.auth import RequestContext, create_session_token, decode_session_token
from cafe_api.config import settings
from cafe_api.services.passwords import hash_password, verify_password


# =============================================================================
# Passwords
# =============================================================================

class TestPasswords:

    def test_round_trip(self):
        stored = hash_password("correct horse")

        assert verify_password("correct horse", stored)
        assert not verify_password("wrong horse", stored)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_never_matches(self):
        assert not verify_password("anything", "not-a-hash")
        assert not verify_password("anything", "md5$1$00$00")


# =============================================================================
# Session tokens
# =============================================================================

class TestSessionTokens:

    def test_decode_returns_user_id(self):
        assert decode_session_token(create_session_token(42)) == 42

    def test_expired_token_is_anonymous(self):
        issued = datetime.now(timezone.utc) - timedelta(seconds=settings.session_max_age_seconds + 60)

        assert decode_session_token(create_session_token(42, now=issued)) is None

    def test_tampered_token_is_anonymous(self):
        token = create_session_token(42)

        assert decode_session_token(token[:-2] + "xx") is None
        assert decode_session_token("garbage") is None

    def test_request_context(self):
        assert RequestContext().current_user_id() is None
        assert not RequestContext().is_authenticated
        assert RequestContext(user_id=7).current_user_id() == 7


# =============================================================================
# Endpoints
# =============================================================================

class TestAuthEndpoints:

    async def test_register(self, client):
        response = await client.post(
            "/auth/register", json={"email": "New@Example.com", "password": "secret123"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new@example.com"
        assert "password_hash" not in body

    async def test_register_duplicate_email(self, client):
        creds = {"email": "dup@example.com", "password": "secret123"}
        await client.post("/auth/register", json=creds)

        response = await client.post("/auth/register", json=creds)

        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_TAKEN"

    async def test_register_validates_input(self, client):
        response = await client.post(
            "/auth/register", json={"email": "not-an-email", "password": "123"}
        )

        assert response.status_code == 422

    async def test_login_sets_cookie_and_me(self, client):
        creds = {"email": "me@example.com", "password": "secret123"}
        await client.post("/auth/register", json=creds)

        login = await client.post("/auth/login", json=creds)

        assert login.status_code == 200
        assert settings.session_cookie_name in login.cookies
        me = await client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "me@example.com"

    async def test_login_wrong_password(self, client):
        await client.post("/auth/register", json={"email": "a@example.com", "password": "secret123"})

        response = await client.post(
            "/auth/login", json={"email": "a@example.com", "password": "wrong-pass"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    async def test_me_anonymous(self, client):
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    async def test_me_for_missing_user(self, client):
        client.cookies.set(settings.session_cookie_name, create_session_token(999))

        response = await client.get("/auth/me")

        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    async def test_logout(self, client):
        creds = {"email": "bye@example.com", "password": "secret123"}
        await client.post("/auth/register", json=creds)
        await client.post("/auth/login", json=creds)

        response = await client.post("/auth/logout")

        assert response.status_code == 204
        assert (await client.get("/auth/me")).status_code == 401
