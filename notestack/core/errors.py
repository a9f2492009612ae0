"""Error taxonomy shared by both services and the handlers that render it.

Every error leaves the service as ``{"error": "<message>"}``. Internal detail
(driver errors, lookup transport failures) is logged, never returned.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ..schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Error occurred at the server. Please try again later"


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class DependencyUnavailableError(ServiceError):
    """Store or remote dependency failed; callers only ever see the generic message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = GENERIC_SERVER_ERROR):
        super().__init__(message)


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def service_error_handler(request: Request, exc: ServiceError):
    return _error_json(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_json(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_json(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error",
        extra={"event": "http.unhandled", "method": request.method, "path": request.url.path},
    )
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
