# =============================================================================
# core/models/base.py - Shared Schema Building Blocks
# =============================================================================
# - SanitizedModel: base for every client-supplied payload; strips markup
#   from all incoming strings before field validation runs
# - PaginationInfo: page metadata returned alongside list results
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field, model_validator

from lib.sanitize import sanitize_value


class SanitizedModel(BaseModel):
    """
    Base model for request payloads.

    Every string (including strings nested in lists) is passed through
    lib.sanitize before validation, so services never see raw markup.
    """

    @model_validator(mode="before")
    @classmethod
    def _sanitize_input(cls, data: Any) -> Any:
        return sanitize_value(data)


class PaginationInfo(BaseModel):
    """
    Pagination metadata for list endpoints.

    Example:
        {
            "page": 2,
            "limit": 20,
            "total": 45,
            "total_pages": 3,
            "has_next": true,
            "has_prev": true
        }
    """

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total matching items")
    total_pages: int = Field(..., ge=0, description="Number of pages")
    has_next: bool = Field(..., description="Whether a later page exists")
    has_prev: bool = Field(..., description="Whether an earlier page exists")
