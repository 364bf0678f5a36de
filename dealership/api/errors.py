"""
Exception handlers.

Every failure is returned in the standard envelope:
{"success": false, "message": ..., "errors": ..., "timestamp": ...}
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dealership.config import settings
from dealership.errors import AppError, translate_storage_error
from dealership.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

# Request parts FastAPI puts in front of the field name
LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie", "form"}


def error_response(status_code: int, message: str, errors: Any = None) -> JSONResponse:
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into [{field, message}]."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in LOCATION_PREFIXES:
            loc = loc[1:]
        errors.append({
            "field": ".".join(loc),
            "message": error.get("msg", "Invalid value"),
        })
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation failed", validation_errors(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    error = translate_storage_error(exc)
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return error_response(error.status_code, error.message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    if settings.is_production:
        return error_response(500, "Internal server error")
    return error_response(500, str(exc) or "Internal server error", {"type": type(exc).__name__})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
