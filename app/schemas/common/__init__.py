from app.schemas.common.base import (
    BaseSchema,
    BaseCreateSchema,
    BaseUpdateSchema,
    BaseResponseSchema,
)
from app.schemas.common.response import ErrorResponse, PaginationMeta, SuccessResponse

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "ErrorResponse",
    "PaginationMeta",
    "SuccessResponse",
]
