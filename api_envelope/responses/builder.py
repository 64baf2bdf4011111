"""Response builder turning request outcomes into envelopes."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from http import HTTPStatus
import logging
from typing import Any

from fastapi import Request
from fastapi import status

from api_envelope.core.config import EnvelopeSettings
from api_envelope.core.config import get_envelope_settings
from api_envelope.core.errors import BadRequestError
from api_envelope.core.errors import EnvelopeError
from api_envelope.core.errors import error_kind
from api_envelope.responses.rules import ClassificationRule
from api_envelope.responses.rules import classify
from api_envelope.responses.rules import default_rules
from api_envelope.responses.rules import error_message
from api_envelope.responses.server import ErrorSink
from api_envelope.responses.server import NoContentResponse
from api_envelope.responses.server import ServerResponse
from api_envelope.schemas.envelope import Envelope
from api_envelope.schemas.envelope import ErrorBody
from api_envelope.schemas.envelope import RequestInformation

RequestLike = Request | str

NOT_FOUND_BODY = ErrorBody(
    type="NOT_FOUND",
    title="not found",
    detail="record not found",
    status=status.HTTP_404_NOT_FOUND,
)
CONFLICT_BODY = ErrorBody(
    type="CONFLICT",
    title="conflict data",
    detail="data is conflicted",
    status=status.HTTP_409_CONFLICT,
)


def request_url(request: RequestLike) -> str:
    """Return the original URL of the request: path plus query string."""
    if isinstance(request, str):
        return request
    path = request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path


def model_name(request: RequestLike) -> str:
    return request_url(request)


def _http_error_type(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "NOT_FOUND"
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return "UNAUTHORIZED"
    if status_code == status.HTTP_403_FORBIDDEN:
        return "FORBIDDEN"
    if status_code == status.HTTP_409_CONFLICT:
        return "CONFLICT"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "INTERNAL_SERVER_ERROR"
    return "BAD_REQUEST"


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


class ResponseBuilder:
    """Stateless factory of envelopes, one call per request.

    Holds only immutable collaborators: a logging sink, settings and the
    ordered classification rules used by :meth:`from_error`.
    """

    def __init__(
        self,
        *,
        logger: ErrorSink | None = None,
        settings: EnvelopeSettings | None = None,
        rules: Sequence[ClassificationRule] | None = None,
    ) -> None:
        self._logger: ErrorSink = logger if logger is not None else logging.getLogger(__name__)
        self._settings = settings if settings is not None else get_envelope_settings()
        self._rules = tuple(rules) if rules is not None else default_rules(self._settings.conflict_patterns)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def _envelope(
        self,
        request: RequestLike,
        *,
        status_code: int,
        data: Any = None,
        error: ErrorBody | None = None,
        has_more: bool | None = None,
    ) -> Envelope:
        info = RequestInformation(url=request_url(request)) if self._settings.include_request_info else None
        return Envelope(
            model=model_name(request),
            data=data,
            action=None,
            error=error,
            request=info,
            status=status_code,
            has_more=has_more,
        )

    def _respond(self, envelope: Envelope) -> ServerResponse:
        return ServerResponse(envelope, logger=self._logger, log_errors=self._settings.log_error_responses)

    def ok(self, payload: Any, request: RequestLike) -> ServerResponse:
        """200 acknowledgement; an absent payload is reported as ``"OK"``."""
        return self._respond(
            self._envelope(request, status_code=status.HTTP_200_OK, data="OK" if payload is None else payload)
        )

    def success(self, payload: Any, request: RequestLike) -> ServerResponse:
        if payload is None:
            return self.not_found(request)
        return self._respond(self._envelope(request, status_code=status.HTTP_200_OK, data=payload))

    def success_list(self, payload: Sequence[Any] | None, request: RequestLike) -> ServerResponse:
        if payload is None:
            return self.not_found(request)
        return self._respond(self._envelope(request, status_code=status.HTTP_200_OK, data=payload))

    def success_list_paginated(
        self,
        payload: Sequence[Any],
        request: RequestLike,
        has_next: bool,
    ) -> ServerResponse:
        """200 page of results; the caller guarantees ``payload`` is a sequence."""
        return self._respond(
            self._envelope(request, status_code=status.HTTP_200_OK, data=payload, has_more=has_next)
        )

    def no_content(self, request: RequestLike) -> ServerResponse:
        envelope = self._envelope(request, status_code=status.HTTP_204_NO_CONTENT, error=NOT_FOUND_BODY)
        return NoContentResponse(envelope, logger=self._logger, log_errors=False)

    def not_found(self, request: RequestLike) -> ServerResponse:
        return self._respond(self._envelope(request, status_code=status.HTTP_404_NOT_FOUND, error=NOT_FOUND_BODY))

    def conflict(self, request: RequestLike) -> ServerResponse:
        return self._respond(self._envelope(request, status_code=status.HTTP_409_CONFLICT, error=CONFLICT_BODY))

    def unauthorized(self, reason: str, request: RequestLike) -> ServerResponse:
        error = ErrorBody(
            type="UNAUTHORIZED",
            title="authentication failed",
            detail=reason,
            status=status.HTTP_401_UNAUTHORIZED,
        )
        return self._respond(self._envelope(request, status_code=status.HTTP_401_UNAUTHORIZED, error=error))

    def bad_request(self, error: BadRequestError, request: RequestLike) -> ServerResponse:
        """400 whose error body is the instance's own detail."""
        return self._respond(
            self._envelope(request, status_code=status.HTTP_400_BAD_REQUEST, error=error.to_data())
        )

    def http_error(self, status_code: int, detail: str | None, request: RequestLike) -> ServerResponse:
        """Envelope for a framework-level HTTP exception with a known status."""
        error = ErrorBody(
            type=_http_error_type(status_code),
            title=_reason_phrase(status_code),
            detail=detail or _reason_phrase(status_code),
            status=status_code,
        )
        return self._respond(self._envelope(request, status_code=status_code, error=error))

    def from_error(self, error: BaseException, request: RequestLike) -> ServerResponse:
        """Classify any raised error and build its envelope.

        The error is logged before classification, whatever rule it hits.
        """
        self._logger.error(
            "Request to %s failed: %s",
            model_name(request),
            error_message(error),
            exc_info=error,
        )

        rule = classify(error, self._rules)
        kind = error_kind(error)
        body = ErrorBody(
            type=kind.value if kind is not None else type(error).__name__,
            title=rule.title,
            detail=error_message(error),
            status=rule.status_code,
            data=error.detail_data() if isinstance(error, EnvelopeError) else None,
        )
        return self._respond(self._envelope(request, status_code=rule.status_code, error=body))


@lru_cache(maxsize=1)
def get_response_builder() -> ResponseBuilder:
    """Return the process-wide builder for dependency injection."""
    return ResponseBuilder()
