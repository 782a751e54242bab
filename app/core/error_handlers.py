# app/core/error_handlers.py
"""
FastAPI exception handlers.

Every error leaves the API in the same envelope:
``{"success": false, "message": ..., "errorCode": ..., "details": {...}}``.
"""

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config.logging import get_logger
from app.core.exceptions import BaseAppException, ErrorCode
from app.schemas.common.response import ErrorResponse

logger = get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: Dict[str, Any] = None,
) -> JSONResponse:
    body = ErrorResponse.create(message=message, error_code=error_code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True)),
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        field_errors.setdefault(location or "body", []).append(error.get("msg", "Invalid value"))
    return field_errors


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    logger.warning(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
        }
    )
    return error_response(exc.status_code, exc.message, exc.error_code.value, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = _field_errors(exc)
    total = sum(len(messages) for messages in field_errors.values())
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Validation failed with {total} error(s)",
        ErrorCode.VALIDATION_ERROR.value,
        {"field_errors": field_errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=exc,
        extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        ErrorCode.INTERNAL_ERROR.value,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
