# --- File: app/schemas/common/response.py ---
"""
Standard API response wrappers for success and error responses.
"""

from typing import Any, Dict, Generic, TypeVar, Union

from pydantic import Field

from app.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "PaginationMeta",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")

    @classmethod
    def create(
        cls,
        message: str,
        data: Union[T, None] = None,
    ):
        """Create success response."""
        return cls(success=True, message=message, data=data)


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    message: str = Field(..., description="Error message")
    error_code: Union[str, None] = Field(
        default=None,
        description="Application error code",
    )
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structured error context",
    )

    @classmethod
    def create(
        cls,
        message: str,
        error_code: Union[str, None] = None,
        details: Union[Dict[str, Any], None] = None,
    ):
        """Create error response."""
        return cls(
            success=False,
            message=message,
            error_code=error_code,
            details=details or {},
        )


class PaginationMeta(BaseSchema):
    """Offset pagination block returned by list endpoints."""

    skip: int = Field(..., ge=0, description="Rows skipped")
    take: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total matching rows")
