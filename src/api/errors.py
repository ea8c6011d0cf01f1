"""Exception handlers mapping domain and provider errors to HTTP responses.

Every error body has the shape ``{"error": "<message>"}``; request validation
failures add ``issues`` with a per-field breakdown. Internal failures are
logged here and reach the client only as "Internal server error".
"""

import logging
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.model.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
)
from port.llm import (
    LLMAuthError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from services.advice_service import AdviceUnavailableError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# (status code, client message)
_LLM_ERRORS: dict[type[LLMError], tuple[int, str]] = {
    LLMRateLimitError: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        "LLM provider rate limit reached. Please wait a moment and try again.",
    ),
    LLMAuthError: (status.HTTP_502_BAD_GATEWAY, "LLM provider authentication failed"),
    LLMTimeoutError: (status.HTTP_504_GATEWAY_TIMEOUT, "LLM provider timeout"),
    LLMEmptyResponseError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Empty response from LLM"),
}


def _error(status_code: int, message: str, headers: dict[str, str] | None = None, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code, headers=headers)


def format_issues(errors: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Group pydantic errors into form-level and per-field messages."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for err in errors:
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]

        loc = list(err.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]

        if err.get("type") == "json_invalid":
            form_errors.append("Malformed JSON body")
        elif loc:
            field_errors.setdefault(".".join(str(p) for p in loc), []).append(msg)
        else:
            form_errors.append(msg)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


async def handle_validation_error(request: Request, exc: RequestValidationError):
    return _error(
        status.HTTP_400_BAD_REQUEST,
        "Invalid payload",
        issues=format_issues(exc.errors()),
    )


async def handle_authentication_error(request: Request, exc: AuthenticationError):
    return _error(status.HTTP_401_UNAUTHORIZED, str(exc), headers={"WWW-Authenticate": "Bearer"})


async def handle_conflict_error(request: Request, exc: ConflictError):
    return _error(status.HTTP_409_CONFLICT, str(exc))


async def handle_not_found_error(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def handle_domain_error(request: Request, exc: DomainError):
    logger.error("Request failed", extra={
        "path": request.url.path,
        "method": request.method,
        "errorType": type(exc).__name__,
        "error": str(exc),
    })
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


async def handle_advice_unavailable(request: Request, exc: AdviceUnavailableError):
    logger.error("Advice requested but no LLM provider key is configured")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def handle_llm_error(request: Request, exc: LLMError):
    status_code, message = status.HTTP_502_BAD_GATEWAY, "LLM provider API error"
    for error_type, mapped in _LLM_ERRORS.items():
        if isinstance(exc, error_type):
            status_code, message = mapped
            break

    logger.warning("LLM call failed", extra={
        "errorType": type(exc).__name__,
        "status_code": status_code,
        "error": str(exc)[:200],
    })
    return _error(status_code, message)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc, extra={
        "path": request.url.path,
        "method": request.method,
    })
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.add_exception_handler(ConflictError, handle_conflict_error)
    app.add_exception_handler(NotFoundError, handle_not_found_error)
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(AdviceUnavailableError, handle_advice_unavailable)
    app.add_exception_handler(LLMError, handle_llm_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
