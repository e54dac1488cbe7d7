"""Every failure leaves the API as ``{code, message, data: null, details}``."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from workbench.services.document_classifier import CustomRequirementError
from workbench.services.document_lifecycle import DocumentLifecycleError, DocumentNotFoundError
from workbench.services.loan_aggregate import LoanNotFoundError

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    400: "bad_request",
    404: "not_found",
    409: "conflict",
    422: "unprocessable_entity",
    429: "rate_limited",
}

# Domain errors carry their own ``code``/``message``/``details``.
DOMAIN_ERROR_STATUS: dict[type[Exception], int] = {
    LoanNotFoundError: 404,
    DocumentNotFoundError: 404,
    DocumentLifecycleError: 400,
    CustomRequirementError: 400,
}

# Keys of an ``HTTPException.detail`` dict that are not copied into ``details``.
_DETAIL_ENVELOPE_KEYS = {"code", "message", "detail", "error"}


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def _as_details(details: Any) -> dict:
    if details is None:
        return {}
    if isinstance(details, dict):
        return details
    if isinstance(details, list):
        return {"errors": details}
    return {"detail": details if isinstance(details, str) else str(details)}


def error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    payload = {"code": code, "message": message, "data": None, "details": _as_details(details)}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def _from_http_detail(detail: Any, status_code: int) -> tuple[str, str, dict]:
    code = _STATUS_CODES.get(status_code, "http_error")
    if isinstance(detail, str):
        return code, detail, {"detail": detail}
    if not isinstance(detail, dict):
        return code, _phrase(status_code), _as_details(detail)

    message = detail.get("message") or detail.get("detail") or detail.get("error") or _phrase(status_code)
    if "details" in detail:
        details = _as_details(detail["details"])
    else:
        details = {key: value for key, value in detail.items() if key not in _DETAIL_ENVELOPE_KEYS}
    return detail.get("code") or code, message, details or {"detail": message}


def _validation_message(errors: list[dict]) -> str:
    if not errors:
        return "Validation failed"
    first = errors[0] or {}
    # The request section (body/query/path) is noise for the UI.
    field = ".".join(str(part) for part in first.get("loc") or [] if part not in {"body", "query", "path"})
    msg = str(first.get("msg") or "Validation failed")
    return f"{field}: {msg}" if field else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code, message, details = _from_http_detail(exc.detail, exc.status_code)
    return error_response(exc.status_code, code, message, details)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(
        (status for error_type, status in DOMAIN_ERROR_STATUS.items() if isinstance(exc, error_type)),
        400,
    )
    logger.info(
        "%s %s rejected: %s",
        request.method,
        request.url.path,
        exc.code,
        extra={"status_code": status_code},
    )
    return error_response(status_code, exc.code, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    return error_response(422, "validation_error", _validation_message(errors), {"errors": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "internal_server_error", "Internal server error")


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = error_response(429, "rate_limited", _phrase(429), getattr(exc, "detail", None))
    headers = getattr(exc, "headers", None)
    if isinstance(headers, dict):
        response.headers.update(headers)
    return response


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    for error_type in DOMAIN_ERROR_STATUS:
        app.add_exception_handler(error_type, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
