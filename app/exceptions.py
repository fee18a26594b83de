# =============================================================================
# app/exceptions.py - Custom Exceptions and Error Envelope
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API in the same envelope:
#   {"success": false, "error": ..., "code": ..., "suggestion"?, "details"?}
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

import logging
import traceback
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class StayloException(Exception):
    """
    Base exception for the Staylo API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "STAYLO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | list[str] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found Exceptions
# =============================================================================

class ListingNotFoundError(StayloException):
    """Raised when a listing ID doesn't exist."""

    def __init__(self, listing_id: str):
        super().__init__(
            message="Listing not found",
            code="LISTING_NOT_FOUND",
            status_code=404,
            suggestion="Check that the listing id is correct and the listing hasn't been deleted",
            details={"listing_id": listing_id}
        )


class InquiryNotFoundError(StayloException):
    """Raised when an inquiry ID doesn't exist."""

    def __init__(self, inquiry_id: str):
        super().__init__(
            message="Inquiry not found",
            code="INQUIRY_NOT_FOUND",
            status_code=404,
            suggestion="Check that the inquiry id is correct",
            details={"inquiry_id": inquiry_id}
        )


class ArticleNotFoundError(StayloException):
    """Raised when neither an article ID nor slug matches."""

    def __init__(self, id_or_slug: str):
        super().__init__(
            message="News post not found",
            code="ARTICLE_NOT_FOUND",
            status_code=404,
            suggestion="Check the article id or slug",
            details={"id_or_slug": id_or_slug}
        )


class SlugConflictError(StayloException):
    """Raised when another article already uses a slug."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Slug already in use: {slug}",
            code="SLUG_CONFLICT",
            status_code=409,
            suggestion="Choose a different slug or edit the existing article",
            details={"slug": slug}
        )


class InvalidSlugError(StayloException):
    """Raised when a title or slug has no characters usable in a URL."""

    def __init__(self, source: str):
        super().__init__(
            message="Slug must contain at least one letter or digit",
            code="INVALID_SLUG",
            status_code=400,
            suggestion="Set a slug made of a-z, 0-9 and hyphens",
            details={"parameter": "slug", "value": source}
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class InvalidQueryError(StayloException):
    """Raised for out-of-range or malformed query parameters."""

    def __init__(self, message: str, parameter: str):
        super().__init__(
            message=message,
            code="INVALID_QUERY",
            status_code=400,
            details={"parameter": parameter}
        )


class RateLimitExceededError(StayloException):
    """Raised when a client IP exceeds its request budget."""

    def __init__(self, retry_after: int):
        super().__init__(
            message="Too many requests. Please try again later.",
            code="RATE_LIMITED",
            status_code=429,
            suggestion=f"Wait {retry_after} seconds before retrying",
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["retry_after"] = self.retry_after
        return result


class AuthenticationError(StayloException):
    """Raised when a request lacks a valid access token."""

    def __init__(self, message: str = "Unauthorized - No token provided"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Sign in and send the access token as 'Authorization: Bearer <token>'",
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(StayloException):
    """Raised when a signed-in user is not on the admin allow-list."""

    def __init__(self, email: str | None):
        super().__init__(
            message="Forbidden - admin access required",
            code="FORBIDDEN",
            status_code=403,
            suggestion="Ask an administrator to add your email to ADMIN_EMAILS",
            details={"email": email},
        )


class LoginFailedError(StayloException):
    """Raised when email/password sign-in is rejected."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="LOGIN_FAILED",
            status_code=401,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class NoImagesError(StayloException):
    """Raised when an upload request carries no files."""

    def __init__(self):
        super().__init__(
            message="No images provided",
            code="NO_IMAGES",
            status_code=400,
            suggestion="Send one or more files in the 'images' form field",
        )


class TooManyFilesError(StayloException):
    """Raised when an upload request carries too many files."""

    def __init__(self, count: int, max_files: int):
        super().__init__(
            message=f"Too many files: {count} (max: {max_files})",
            code="TOO_MANY_FILES",
            status_code=400,
            suggestion=f"Upload at most {max_files} images per request",
            details={"count": count, "max_files": max_files}
        )


class InvalidFileTypeError(StayloException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(StayloException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, filename: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {filename} is {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload images smaller than {max_mb}MB",
            details={"filename": filename, "size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class StorageUploadError(StayloException):
    """Raised when image upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload image to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class StorageDeleteError(StayloException):
    """Raised when image removal from storage fails."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to delete image from storage: {error}",
            code="STORAGE_DELETE_ERROR",
            status_code=502,
            details={"path": path, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def staylo_exception_handler(
    request: Request,
    exc: StayloException
) -> JSONResponse:
    """Convert StayloException to the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """Report hosted store failures as a bad gateway."""
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    content: dict[str, Any] = {
        "success": False,
        "error": exc.message if settings.is_development else "Database request failed",
        "code": exc.code,
    }
    if exc.suggestion and settings.is_development:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Wrap framework HTTP errors (404 routes, 405 methods) in the envelope.

    Headers such as Allow are passed through.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "code": f"HTTP_{exc.status_code}",
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Returns 400 with one readable line per problem, e.g.
    "body.price: Input should be greater than 0".
    """
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg')}")

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation failed",
            "code": "VALIDATION_ERROR",
            "details": details,
        }
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Internal messages are only exposed in development.
    """
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")

    content: dict[str, Any] = {
        "success": False,
        "error": "Internal server error",
        "code": "INTERNAL_ERROR",
    }
    if settings.is_development:
        content["error"] = str(exc) or exc.__class__.__name__
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(status_code=500, content=content)
