"""Exception handlers rendering failures in the response envelope.

    {"success": false, "error": <kind>, "message": <text>, "details": {...}}
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.shared.errors import (
    ConflictError,
    InternalError,
    InvalidRequestError,
    NotFoundError,
    StorefrontError,
)
from storefront.utils.logging import get_logger
from storefront.utils.settings import is_development

logger = get_logger(__name__)


def error_response(exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return error_response(exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(InvalidRequestError("Validation failed", exc.messages))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(InvalidRequestError("Malformed request", {"errors": exc.errors()}))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(NotFoundError(str(exc) or "Resource not found"))


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("concurrent_update_conflict", path=request.url.path, error=str(exc))
    return error_response(ConflictError("The resource was modified concurrently, please retry"))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    message = str(exc) if is_development() else "Internal server error"
    return error_response(InternalError(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
