"""Built responses: an immutable envelope plus the operation that transmits it."""

from __future__ import annotations

from typing import Any
from typing import Protocol

from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.responses import PlainTextResponse
from fastapi.responses import Response

from api_envelope.schemas.envelope import Envelope


class ErrorSink(Protocol):
    """Logging collaborator; ``logging.Logger`` satisfies it."""

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


class ServerResponse:
    """Envelope produced for one request."""

    def __init__(self, envelope: Envelope, *, logger: ErrorSink, log_errors: bool = True) -> None:
        self._envelope = envelope
        self._logger = logger
        self._log_errors = log_errors

    def body(self) -> Envelope:
        return self._envelope

    @property
    def status_code(self) -> int:
        return self._envelope.status

    def send(self) -> Response:
        """Return the framework response carrying the status and JSON envelope.

        Serialization failures degrade to a plain-text body with the same
        status instead of propagating into the request handler.
        """
        envelope = self._envelope
        try:
            if envelope.error is not None and self._log_errors:
                self._logger.warning(
                    "Sending error envelope model=%s status=%s type=%s detail=%s",
                    envelope.model,
                    envelope.status,
                    envelope.error.type,
                    envelope.error.detail,
                )
            return self._render()
        except Exception as exc:
            self._logger.exception("Failed to render envelope for model=%s", envelope.model)
            return PlainTextResponse(
                str(exc),
                status_code=envelope.status or status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    def _render(self) -> Response:
        return JSONResponse(status_code=self._envelope.status, content=self._envelope.to_wire())


class NoContentResponse(ServerResponse):
    """204 response; the envelope stays inspectable but no body is written."""

    def send(self) -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
