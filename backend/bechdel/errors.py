"""Error taxonomy, global HTTP error handling and JSON response helpers."""
from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class BechdelError(Exception):
    """Base class of every failure the services report to their callers."""

    kind: str = "error"
    status: int = 500
    retryable: bool = False
    default_message: str = "unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(BechdelError):
    kind = "authentication"
    status = 401
    default_message = "You need to be signed in to do that."


class ValidationError(BechdelError):
    kind = "validation"
    status = 422
    default_message = "Some of the submitted fields are missing or invalid."


class AuthorizationError(BechdelError):
    kind = "authorization"
    status = 403
    default_message = "You can only delete your own comments."


class NotFoundError(BechdelError):
    kind = "not_found"
    status = 404
    default_message = "The requested record does not exist."


class BusyError(BechdelError):
    kind = "busy"
    status = 409
    default_message = "An analysis is already running for you; wait for it to finish."


class PersistenceError(BechdelError):
    kind = "persistence"
    status = 503
    retryable = True
    default_message = "The result could not be saved. Please try again."


class ClassificationErrorKind(str, Enum):
    TIMEOUT = "timeout"
    SERVICE_FAILURE = "service_failure"
    MALFORMED_RESPONSE = "malformed_response"


_CLASSIFICATION_MESSAGES = {
    ClassificationErrorKind.TIMEOUT: "The analysis service took too long to answer. Please try again.",
    ClassificationErrorKind.SERVICE_FAILURE: "The analysis service is unavailable right now.",
    ClassificationErrorKind.MALFORMED_RESPONSE: "The analysis service returned an unreadable answer.",
}


class ClassificationError(BechdelError):
    kind = "classification"
    status = 502

    def __init__(
        self,
        error_kind: ClassificationErrorKind,
        message: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.error_kind = error_kind
        self.cause = cause
        super().__init__(message or _CLASSIFICATION_MESSAGES[error_kind])

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.error_kind is ClassificationErrorKind.TIMEOUT

    @property
    def status(self) -> int:  # type: ignore[override]
        return 504 if self.error_kind is ClassificationErrorKind.TIMEOUT else 502


def error_body(err: BechdelError) -> dict[str, Any]:
    body: dict[str, Any] = {"error": err.kind, "message": err.message, "retryable": err.retryable}
    if isinstance(err, ClassificationError):
        body["reason"] = err.error_kind.value
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BechdelError)
    async def domain_error(_: Request, err: BechdelError):
        if err.status >= 500:
            logger.warning("request failed: {} ({})", err.kind, err.message)
        return JSONResponse(error_body(err), status_code=err.status)

    @app.exception_handler(RequestValidationError)
    async def unprocessable(_: Request, err: RequestValidationError):
        return JSONResponse(
            {"error": "validation", "message": ValidationError.default_message, "details": jsonable_encoder(err.errors())},
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def internal(_: Request, err: Exception):
        logger.exception("unhandled error: {}", err)
        return JSONResponse({"error": "internal_server_error", "message": "unexpected error"}, status_code=500)


def ok(data: Any, status: int = 200) -> JSONResponse:
    return JSONResponse({"data": jsonable_encoder(data)}, status_code=status)
