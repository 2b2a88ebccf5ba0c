from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

logger = logging.getLogger(__name__)

FieldErrors = dict[str, list[str]]


class APIError(HTTPException):
    """Base class for errors that map onto a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An internal server error occurred."

    def __init__(
        self,
        detail: str | None = None,
        *,
        errors: FieldErrors | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail, headers=headers)
        self.errors = errors


class ValidationFailed(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed."


class Unauthenticated(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication failed. Invalid or expired token."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden: you do not have the required role to access this resource."


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Record not found."


class Conflict(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with an existing record."


def _error_body(detail: str, errors: FieldErrors | None = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": detail}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return body


def field_errors_from_pydantic(errors: list[dict[str, Any]]) -> FieldErrors:
    """Flatten pydantic error dicts into {"field.path": [messages]}."""
    flattened: FieldErrors = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        key = ".".join(loc) or "__root__"
        flattened.setdefault(key, []).append(err.get("msg", "Invalid value"))
    return flattened


async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), exc.errors),
        headers=exc.headers,
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed.", field_errors_from_pydantic(list(exc.errors()))),
    )


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body(Conflict.default_detail),
    )


async def _no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(NotFound.default_detail))


async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(APIError.default_detail, error=type(exc).__name__),
    )


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy and persistence failures onto JSON responses."""
    app.add_exception_handler(APIError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(NoResultFound, _no_result_handler)
    app.add_exception_handler(SQLAlchemyError, _internal_error_handler)
    app.add_exception_handler(Exception, _internal_error_handler)
