# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Verifies Supabase access tokens on the server: ES256 tokens against the
# project's published signing keys, HS256 tokens against the shared secret.
#
# API routes read the token from "Authorization: Bearer <token>"; admin
# pages read the same token from the HTTP-only admin cookie.
#
#   @router.post("/listings")
#   async def create(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

# Missing tokens are reported by us, not FastAPI
security_optional = HTTPBearer(auto_error=False)


class AdminLoginRequired(Exception):
    """Raised by admin pages when the session cookie is missing or invalid."""

    def __init__(self, next_path: str = "/admin"):
        super().__init__(next_path)
        self.next_path = next_path


class SigningKeyCache:
    """
    Supabase's published ES256 keys, refetched at most once per `ttl`.

    A failed refetch keeps serving the previous key set.
    """

    def __init__(self, ttl: float = 3600):
        self.ttl = ttl
        self._keys: list[dict[str, Any]] = []
        self._fetched_at: float | None = None

    @property
    def url(self) -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    def _refresh(self) -> None:
        now = time.monotonic()
        if self._fetched_at is not None and now - self._fetched_at < self.ttl:
            return
        try:
            response = httpx.get(self.url, timeout=10)
            response.raise_for_status()
            self._keys = response.json().get("keys", [])
            self._fetched_at = now
            logger.debug(f"Loaded {len(self._keys)} signing keys from {self.url}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Signing key refresh failed: {e}")

    def find(self, kid: str) -> dict[str, Any] | None:
        self._refresh()
        return next((key for key in self._keys if key.get("kid") == kid), None)


signing_keys = SigningKeyCache()


def _shared_secret() -> tuple[str, str]:
    # An empty HS256 key would accept tokens anyone can sign
    if not settings.SUPABASE_JWT_SECRET:
        logger.warning("HS256 token rejected: SUPABASE_JWT_SECRET is not set")
        raise AuthenticationError("Unauthorized - Token verification failed")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def _verification_key(token: str) -> tuple[Any, str]:
    """
    Pick the (key, algorithm) pair a token should be checked against.

    Raises:
        AuthenticationError: If the shared secret is needed but unset
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return _shared_secret()

    alg, kid = header.get("alg", "HS256"), header.get("kid")
    if alg == "HS256":
        return _shared_secret()

    key = signing_keys.find(kid) if kid else None
    if key is None:
        logger.warning(f"No published key for alg={alg} kid={kid}; trying the shared secret")
        return _shared_secret()
    return key, alg


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        AuthenticationError: If the token is malformed, unsigned by
            Supabase, expired or missing a user id
    """
    key, algorithm = _verification_key(token)
    try:
        claims = jwt.decode(token, key, algorithms=[algorithm], audience="authenticated")
    except ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise AuthenticationError("Unauthorized - Invalid or expired token")
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise AuthenticationError("Unauthorized - Token verification failed")

    subject = claims.get("sub")
    try:
        user_id = UUID(str(subject))
    except ValueError:
        logger.warning(f"Access token subject is not a user id: {subject}")
        raise AuthenticationError("Unauthorized - Token verification failed")

    return AuthUser(id=user_id, email=claims.get("email"))


def ensure_admin(user: AuthUser) -> AuthUser:
    """
    Apply the ADMIN_EMAILS allow-list.

    An empty allow-list admits every authenticated user.

    Raises:
        ForbiddenError: If the user's email isn't listed
    """
    allowed = settings.admin_emails_list
    if allowed and (user.email or "").lower() not in allowed:
        logger.warning(f"Rejected non-admin user: {user.email}")
        raise ForbiddenError(user.email)
    return user


def _admin_or_none(token: str | None) -> AuthUser | None:
    if not token:
        return None
    try:
        return ensure_admin(decode_access_token(token))
    except (AuthenticationError, ForbiddenError):
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_optional)
) -> AuthUser:
    """
    Require an admin's Bearer token.

    Raises:
        AuthenticationError: 401 if the token is missing or invalid
        ForbiddenError: 403 if the user isn't on the allow-list
    """
    if credentials is None:
        raise AuthenticationError()

    user = ensure_admin(decode_access_token(credentials.credentials))
    logger.debug(f"Authenticated admin: {user.email}")
    return user


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_optional)
) -> AuthUser | None:
    """Like get_current_user, but None instead of an error."""
    return _admin_or_none(credentials.credentials if credentials else None)


def get_admin_from_cookie(request: Request) -> AuthUser | None:
    """Admin behind the session cookie, or None."""
    return _admin_or_none(request.cookies.get(settings.ADMIN_COOKIE_NAME))


async def require_admin_page(request: Request) -> AuthUser:
    """
    Gate for server-rendered admin pages.

    Raises:
        AdminLoginRequired: Redirected to the login page by the app
    """
    user = get_admin_from_cookie(request)
    if user is None:
        raise AdminLoginRequired(request.url.path)
    return user
