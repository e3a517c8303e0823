"""Error bodies produced by the HTTP layer itself.

Engine failures are rendered as ToolError (re-exported here). Requests that
fail FastAPI's validation before reaching a route get a
ValidationErrorResponse with the same envelope and one entry per offending
field.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from staybook.models import ErrorCode, ToolError

__all__ = [
    "ErrorCode",
    "ToolError",
    "ValidationErrorResponse",
    "ValidationErrorDetail",
]

VALIDATION_ERROR_CODE = "ERR_VALIDATION"


class ValidationErrorDetail(BaseModel):
    """One rejected field."""

    model_config = ConfigDict(strict=True)

    loc: list[str | int] = Field(
        ...,
        description="Where the bad value sits, request part first",
        examples=[["body", "endDate"], ["query", "listingPublicId"]],
    )
    msg: str = Field(..., examples=["Input should have timezone info"])
    type: str = Field(..., examples=["timezone_aware"])


class ValidationErrorResponse(BaseModel):
    """HTTP 400 body for malformed requests."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = VALIDATION_ERROR_CODE
    message: str = "Request validation failed"
    recovery: str = "Fix the listed fields and send the request again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> ValidationErrorResponse:
    """Build the 400 body from pydantic's `errors()` entries.

    Locations keep list indexes as ints; every other segment becomes a
    string.
    """
    return ValidationErrorResponse(
        details=[
            ValidationErrorDetail(
                loc=[part if isinstance(part, int) else str(part) for part in error.get("loc", ())],
                msg=str(error.get("msg", "")),
                type=str(error.get("type", "")),
            )
            for error in errors
        ]
    )
