# =============================================================================
# app/responses.py - Success Envelope
# =============================================================================
# Every successful API response has the shape
#   {"success": true, "data"?, "message"?, "pagination"?}
# =============================================================================

from typing import Any

from fastapi.encoders import jsonable_encoder

from core.models.base import PaginationInfo


def success_response(
    data: Any = None,
    message: str | None = None,
    pagination: PaginationInfo | None = None,
) -> dict[str, Any]:
    """
    Build the success envelope.

    Models, datetimes and enums inside `data` are converted to JSON types.

    Example:
        success_response({"id": listing_id}, message="Listing created successfully")
    """
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination.model_dump()
    return body
