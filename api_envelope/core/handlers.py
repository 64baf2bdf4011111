"""Exception handler registration routing every failure through the builder."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_envelope.core.errors import EnvelopeError
from api_envelope.core.errors import InvalidFormatError
from api_envelope.responses.builder import ResponseBuilder
from api_envelope.responses.builder import get_response_builder
from api_envelope.schemas.envelope import FieldIssue

VALIDATION_FAILED_MESSAGE = "Request validation failed"


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


def validation_error_from(exc: RequestValidationError) -> InvalidFormatError:
    """Translate framework validation issues into an InvalidFormatError."""
    issues: list[FieldIssue] = []
    for issue in exc.errors():
        issues.append(
            FieldIssue(
                field=_format_location(issue.get("loc", ())),
                type=str(issue["type"]) if issue.get("type") else None,
                required=True if issue.get("type") == "missing" else None,
                message=str(issue.get("msg", "Invalid value")),
            )
        )
    return InvalidFormatError(VALIDATION_FAILED_MESSAGE, field_issues=issues)


def register_error_handlers(app: FastAPI, builder: ResponseBuilder | None = None) -> None:
    """Attach envelope-producing error handlers to a FastAPI app instance."""

    def _builder() -> ResponseBuilder:
        return builder if builder is not None else get_response_builder()

    async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
        return _builder().bad_request(validation_error_from(exc), request).send()

    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        detail = exc.detail if isinstance(exc.detail, str) else None
        return _builder().http_error(exc.status_code, detail, request).send()

    async def envelope_error_handler(request: Request, exc: EnvelopeError) -> Response:
        return _builder().from_error(exc, request).send()

    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        return _builder().from_error(exc, request).send()

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(EnvelopeError, envelope_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
