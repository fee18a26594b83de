# =============================================================================
# tests/test_auth.py - Token Verification and Login Tests
# =============================================================================
# Tokens are signed locally with the HS256 test secret from conftest.
# =============================================================================

from unittest.mock import MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient
from supabase import AuthError

from app.auth.dependencies import SigningKeyCache, decode_access_token, ensure_admin
from app.auth.models import AuthUser
from app.auth.routes import DEFAULT_LOGIN_ERROR, login_error_message, sign_in
from app.config import settings
from app.exceptions import AuthenticationError, ForbiddenError, LoginFailedError
from app.main import app

from tests.conftest import ADMIN_USER_ID, make_token


class FakeAuthError(AuthError):
    """AuthError with the attributes login_error_message reads."""

    def __init__(self, code: str | None, status: int = 400):
        Exception.__init__(self, code or "error")
        self.message = code or "error"
        self.code = code
        self.status = status


class TestDecodeAccessToken:
    """Tests for Supabase access token verification."""

    def test_valid_token(self):
        user = decode_access_token(make_token())
        assert str(user.id) == ADMIN_USER_ID
        assert user.email == "admin@staylo.com"

    def test_expired_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            decode_access_token(make_token(expires_in=-60))
        assert exc_info.value.message == "Unauthorized - Invalid or expired token"

    def test_wrong_secret(self):
        with pytest.raises(AuthenticationError) as exc_info:
            decode_access_token(make_token(secret="not-the-secret"))
        assert exc_info.value.message == "Unauthorized - Token verification failed"

    def test_wrong_audience(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(make_token(audience="anon"))

    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.token")

    def test_non_uuid_subject(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(make_token(sub="user-1"))

    def test_unset_secret_rejects_hs256(self):
        """Without a shared secret, a token signed with an empty key is refused."""
        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            token = make_token()
            with pytest.raises(AuthenticationError) as exc_info:
                decode_access_token(token)
        assert exc_info.value.message == "Unauthorized - Token verification failed"


class TestSigningKeyCache:
    """Tests for the published signing key cache."""

    @pytest.fixture
    def jwks_response(self):
        response = MagicMock()
        response.json.return_value = {"keys": [{"kid": "k1", "kty": "EC"}]}
        return response

    def test_finds_key_and_caches(self, jwks_response):
        cache = SigningKeyCache()
        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response) as get:
            assert cache.find("k1") == {"kid": "k1", "kty": "EC"}
            assert cache.find("other") is None

        get.assert_called_once()
        assert get.call_args.args[0].endswith("/auth/v1/.well-known/jwks.json")

    def test_refetches_after_ttl(self, jwks_response):
        cache = SigningKeyCache(ttl=0)
        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response) as get:
            cache.find("k1")
            cache.find("k1")
        assert get.call_count == 2

    def test_failed_refresh_keeps_old_keys(self, jwks_response):
        cache = SigningKeyCache(ttl=0)
        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response):
            cache.find("k1")
        with patch("app.auth.dependencies.httpx.get", side_effect=httpx.ConnectError("down")):
            assert cache.find("k1") == {"kid": "k1", "kty": "EC"}


class TestEnsureAdmin:
    """Tests for the admin allow-list."""

    def test_listed_email(self):
        user = AuthUser(id=ADMIN_USER_ID, email="Admin@Staylo.com")
        assert ensure_admin(user) is user

    def test_unlisted_email(self):
        with pytest.raises(ForbiddenError):
            ensure_admin(AuthUser(id=ADMIN_USER_ID, email="student@example.com"))

    def test_empty_allow_list_admits_everyone(self):
        with patch.object(settings, "ADMIN_EMAILS", ""):
            ensure_admin(AuthUser(id=ADMIN_USER_ID, email="anyone@example.com"))


class TestLoginErrorMessage:
    """Tests for mapping Supabase Auth errors to form messages."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("invalid_credentials", "Invalid email or password"),
            ("user_not_found", "Invalid email or password"),
            ("email_address_invalid", "Invalid email address"),
            ("user_banned", "This account has been disabled"),
            ("over_request_rate_limit", "Too many failed login attempts. Please try again later"),
            ("something_new", DEFAULT_LOGIN_ERROR),
        ],
    )
    def test_codes(self, code, expected):
        assert login_error_message(FakeAuthError(code)) == expected

    def test_status_429_without_code(self):
        assert login_error_message(FakeAuthError(None, status=429)).startswith("Too many")


class TestSignIn:
    """Tests for password sign-in through Supabase Auth."""

    @pytest.fixture
    def auth_client(self):
        client = MagicMock()
        with patch("app.auth.routes.SupabaseClient") as db:
            db.get_auth_client.return_value = client
            yield client

    def _session_response(self, email="admin@staylo.com"):
        response = MagicMock()
        response.session.access_token = "access-token"
        response.session.expires_in = 3600
        response.user.id = ADMIN_USER_ID
        response.user.email = email
        return response

    def test_success(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value = self._session_response()

        token = sign_in("admin@staylo.com", "secret")

        assert token.access_token == "access-token"
        assert token.token_type == "bearer"
        assert token.user.email == "admin@staylo.com"
        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "admin@staylo.com", "password": "secret"}
        )

    def test_rejected_credentials(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = FakeAuthError("invalid_credentials")

        with pytest.raises(LoginFailedError) as exc_info:
            sign_in("admin@staylo.com", "wrong")
        assert exc_info.value.message == "Invalid email or password"

    def test_non_admin_is_forbidden(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value = self._session_response("student@example.com")
        with pytest.raises(ForbiddenError):
            sign_in("student@example.com", "secret")


class TestAuthEndpoints:
    """Tests for /api/v1/auth routes."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_verify_with_token(self, client):
        response = client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {make_token()}"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"valid": True, "user_id": ADMIN_USER_ID, "email": "admin@staylo.com"},
        }

    def test_me_without_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized - No token provided"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_non_admin(self, client):
        token = make_token(email="student@example.com")
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_login_failure_envelope(self, client):
        with patch("app.auth.routes.sign_in", side_effect=LoginFailedError("Invalid email or password")):
            response = client.post("/api/v1/auth/login", json={"email": "a@b.com", "password": "x"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid email or password", "code": "LOGIN_FAILED"}
