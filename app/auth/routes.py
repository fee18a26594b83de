# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Admin sign-in goes through Supabase Auth (email + password). The returned
# access token is then sent as a Bearer token to protected API routes.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from supabase import AuthError

from app.auth.dependencies import ensure_admin, get_current_user
from app.auth.models import AuthUser, LoginRequest, TokenResponse
from app.exceptions import LoginFailedError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# Supabase Auth error codes -> messages shown on the login form
LOGIN_ERROR_MESSAGES = {
    "invalid_credentials": "Invalid email or password",
    "user_not_found": "Invalid email or password",
    "validation_failed": "Invalid email address",
    "email_address_invalid": "Invalid email address",
    "user_banned": "This account has been disabled",
    "over_request_rate_limit": "Too many failed login attempts. Please try again later",
}
DEFAULT_LOGIN_ERROR = "Login failed. Please try again"


def login_error_message(error: AuthError) -> str:
    """Friendly message for a Supabase Auth failure."""
    code = getattr(error, "code", None)
    if code in LOGIN_ERROR_MESSAGES:
        return LOGIN_ERROR_MESSAGES[code]
    if getattr(error, "status", None) == 429:
        return LOGIN_ERROR_MESSAGES["over_request_rate_limit"]
    return DEFAULT_LOGIN_ERROR


def sign_in(email: str, password: str) -> TokenResponse:
    """
    Exchange admin credentials for an access token.

    Raises:
        LoginFailedError: If Supabase rejects the credentials
        ForbiddenError: If the account isn't on the admin allow-list
    """
    auth_client = SupabaseClient.get_auth_client()

    try:
        response = auth_client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
    except AuthError as e:
        logger.warning(f"Login failed for {email}: {e}")
        raise LoginFailedError(login_error_message(e))

    session = response.session
    if session is None or response.user is None:
        raise LoginFailedError(DEFAULT_LOGIN_ERROR)

    user = ensure_admin(AuthUser(id=response.user.id, email=response.user.email))
    logger.info(f"Admin signed in: {user.email}")
    return TokenResponse(
        access_token=session.access_token,
        expires_in=session.expires_in,
        user=user,
    )


@router.post("/login")
async def login(body: LoginRequest) -> dict:
    """
    Sign in to the admin panel.

    Returns:
        Success envelope with TokenResponse data

    Raises:
        401: Invalid credentials (with a friendly message)
        403: Not an admin
    """
    token = sign_in(body.email, body.password)
    return {"success": True, "data": token.model_dump(mode="json")}


@router.get("/me")
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Get the signed-in admin.

    Raises:
        401: If not authenticated
    """
    return {"success": True, "data": user.model_dump(mode="json")}


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {
        "success": True,
        "data": {
            "valid": True,
            "user_id": str(user.id),
            "email": user.email,
        },
    }
