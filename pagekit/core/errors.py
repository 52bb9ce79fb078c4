"""Structured error values and their FastAPI exception handlers."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pagekit.schemas.error import ErrorBody
from pagekit.schemas.error import ErrorDetail
from pagekit.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base application exception rendered in the shared error envelope."""

    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Sequence[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = list(details) if details else None


def _type_name(entity: Any) -> str:
    if isinstance(entity, type):
        return entity.__name__
    return type(entity).__name__


class NotFoundError(APIError):
    """Raised by repositories when an entity cannot be found by its id."""

    def __init__(self, entity: Any) -> None:
        self.entity = entity
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="not_found",
            message=f"{_type_name(entity)} not found",
        )


class RepositoryError(APIError):
    """Failure at repository level, wrapping the underlying cause."""

    def __init__(self, usecase: str, err: BaseException | str, *, version_id: int = 0) -> None:
        self.usecase = usecase
        self.version_id = version_id
        self.err = err
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="repository_error",
            message=f"err in repository for usecase {usecase}: '{err}'",
        )


class DeletePeriodError(APIError):
    """Failure at repository level while deleting a period."""

    def __init__(
        self,
        usecase: str,
        err: BaseException | str,
        *,
        period_id: int,
        version_id: int = 0,
    ) -> None:
        self.usecase = usecase
        self.version_id = version_id
        self.period_id = period_id
        self.err = err
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="repository_error",
            message=f"err in deleting period for usecase {usecase}: '{err}' for periodID {period_id}",
        )


class RowsAffectedError(APIError):
    """Raised when an update touched a different number of rows than expected."""

    def __init__(
        self,
        usecase: str,
        *,
        affected_rows: int,
        expected_rows: int,
        version_id: int = 0,
    ) -> None:
        self.usecase = usecase
        self.version_id = version_id
        self.affected_rows = affected_rows
        self.expected_rows = expected_rows
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="rows_affected_mismatch",
            message=(
                f"err in repository for usecase {usecase}: "
                f"{affected_rows} affected rows, {expected_rows} was expected"
            ),
        )


class BadRequestKeyError(APIError):
    """Raised when a required key is not present in the URL."""

    def __init__(self, key: str) -> None:
        self.key = key
        message = f'bad request: "{key}" is not found in url'
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="bad_request",
            message=message,
            details=[ErrorDetail(key=key, issue="not found in url")],
        )


class BadRequestValueError(APIError):
    """Raised when the value bound to a request key is not valid.

    ``value`` is the offending value when it could be read; ``err`` is the
    parse or validation cause otherwise.
    """

    def __init__(self, key: str, *, value: Any = None, err: BaseException | str | None = None) -> None:
        self.key = key
        self.value = value
        self.err = err
        if value is not None:
            message = f'bad request: {value} is not a valid value for key "{key}"'
            issue = f"{value} is not a valid value"
        else:
            message = f'bad request, value from key "{key}" could not be parsed: "{err}"'
            issue = str(err)
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="bad_request",
            message=message,
            details=[ErrorDetail(key=key, issue=issue)],
        )


class MissingQueryParameterError(APIError):
    """Raised when a URL query parameter is missing."""

    def __init__(self, key: str = "") -> None:
        self.key = key
        if not key:
            message = "missing key in url query"
            details = None
        else:
            message = f'missing key "{key}" in query string'
            details = [ErrorDetail(key=key, issue="missing")]
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="missing_parameter",
            message=message,
            details=details,
        )


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=ErrorBody(code=code, message=message, details=list(details) if details else None))
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    return [
        ErrorDetail(key=_format_location(issue.get("loc", ())), issue=str(issue.get("msg", "Invalid value")))
        for issue in exc.errors()
    ]


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the error envelope."""

    return _build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=_validation_details(exc),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize Starlette HTTP exceptions (unknown routes, bad methods)."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return _build_error_response(
        status_code=exc.status_code,
        code=_http_error_code(exc.status_code),
        message=message,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Return structured errors in the shared envelope."""

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return _build_error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="internal_error",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all pagekit error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
