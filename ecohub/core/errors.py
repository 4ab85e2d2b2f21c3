"""Error types raised by route handlers and the JSON handlers that render them."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class EcoHubError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(EcoHubError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(EcoHubError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(EcoHubError):
    """Bad credentials. Unknown email and wrong password look the same."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(EcoHubError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(EcoHubError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(EcoHubError):
    status_code = status.HTTP_404_NOT_FOUND


def error_body(message: str, error: Any = None) -> dict:
    body = {'message': message}
    if error is not None:
        body['error'] = error
    return body


def setup_error_handlers(app: FastAPI) -> None:
    """Register handlers so every error leaves the API as {message, error?}."""

    @app.exception_handler(EcoHubError)
    async def ecohub_error_handler(_request: Request, exc: EcoHubError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.error))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, 'headers', None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body('Invalid request', jsonable_errors(exc)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception('Database error on %s %s', request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body('Server error', str(exc)),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body('Server error', str(exc)),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {'loc': list(item.get('loc', ())), 'msg': item.get('msg', ''), 'type': item.get('type', '')}
        for item in exc.errors()
    ]
