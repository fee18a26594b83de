# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.delete("/listings/{listing_id}")
#   async def delete(listing_id: str, user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

from app.auth.dependencies import (
    AdminLoginRequired,
    decode_access_token,
    get_admin_from_cookie,
    get_current_user,
    get_current_user_optional,
    require_admin_page,
)
from app.auth.models import AuthUser, LoginRequest, TokenResponse

__all__ = [
    "AdminLoginRequired",
    "decode_access_token",
    "get_admin_from_cookie",
    "get_current_user",
    "get_current_user_optional",
    "require_admin_page",
    "AuthUser",
    "LoginRequest",
    "TokenResponse",
]
