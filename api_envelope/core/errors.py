"""Typed error taxonomy raised by request handlers and domain code."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from enum import Enum
from typing import Any
from typing import ClassVar

from fastapi import status

from api_envelope.schemas.envelope import ErrorBody
from api_envelope.schemas.envelope import FieldIssue


class ErrorKind(str, Enum):
    """Tag identifying a category of request or internal failure."""

    BAD_REQUEST = "BAD_REQUEST"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    CONFLICT = "CONFLICT"
    NO_PERMISSION = "NO_PERMISSION"
    NOT_FOUND = "NOT_FOUND"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    BAD_DEVELOPER = "BAD_DEVELOPER"
    INTERNAL = "INTERNAL"


# Each kind maps to the kind it specializes.
REFINES: Mapping[ErrorKind, ErrorKind] = {
    ErrorKind.INVALID_FORMAT: ErrorKind.BAD_REQUEST,
    ErrorKind.INVALID_PHONE_NUMBER: ErrorKind.INVALID_FORMAT,
}


def refines(kind: ErrorKind, base: ErrorKind) -> bool:
    """Return True when ``kind`` is ``base`` or one of its specializations."""
    current: ErrorKind | None = kind
    while current is not None:
        if current is base:
            return True
        current = REFINES.get(current)
    return False


def error_kind(error: BaseException) -> ErrorKind | None:
    """Return the taxonomy tag carried by ``error``, if any."""
    kind = getattr(error, "kind", None)
    return kind if isinstance(kind, ErrorKind) else None


def is_kind(error: BaseException, base: ErrorKind) -> bool:
    kind = error_kind(error)
    return kind is not None and refines(kind, base)


def _coerce_issue(issue: FieldIssue | Mapping[str, Any]) -> FieldIssue:
    if isinstance(issue, FieldIssue):
        return issue
    return FieldIssue.model_validate(dict(issue))


class EnvelopeError(Exception):
    """Base class for every taxonomy error.

    Instances record a message and optional field issues and are never
    mutated after construction.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        field_issues: Iterable[FieldIssue | Mapping[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._field_issues = tuple(_coerce_issue(issue) for issue in field_issues or ())

    @property
    def message(self) -> str:
        return self._message

    @property
    def field_issues(self) -> tuple[FieldIssue, ...]:
        return self._field_issues

    @property
    def type_name(self) -> str:
        return self.kind.value

    def detail_data(self) -> dict[str, Any] | None:
        """Structured detail for the error body, or None when there is none."""
        if not self._field_issues:
            return None
        return {"fields": [issue.to_data() for issue in self._field_issues]}


class InternalError(EnvelopeError):
    """Catch-all internal failure."""

    kind = ErrorKind.INTERNAL


class BadDeveloperError(EnvelopeError):
    """Programmer-error marker; signals caller misuse, not a request fault."""

    kind = ErrorKind.BAD_DEVELOPER

    def __init__(self, message: str) -> None:
        super().__init__(f"BAD_DEVELOPER_EXCEPTION:: seems like you made a mistake! : {message}")


class NotImplementedAPIError(EnvelopeError):
    kind = ErrorKind.NOT_IMPLEMENTED


class ConflictError(EnvelopeError):
    kind = ErrorKind.CONFLICT


class NotFoundError(EnvelopeError):
    kind = ErrorKind.NOT_FOUND


class NoPermissionError(EnvelopeError):
    kind = ErrorKind.NO_PERMISSION

    def __init__(self, message: str) -> None:
        super().__init__(f"OPERATION PERMISSION DENIED:: {message}")


class BadRequestError(EnvelopeError):
    """Client sent a request that cannot be served as given."""

    kind = ErrorKind.BAD_REQUEST

    def to_data(self) -> ErrorBody:
        """Return this error's own 400 error body."""
        return ErrorBody(
            type=self.type_name,
            title=self.message,
            detail=self.message,
            status=status.HTTP_400_BAD_REQUEST,
            data=self.detail_data(),
        )


class InvalidFormatError(BadRequestError):
    """Payload fields failed format checks; carries the offending fields."""

    kind = ErrorKind.INVALID_FORMAT


class InvalidPhoneNumberError(InvalidFormatError):
    kind = ErrorKind.INVALID_PHONE_NUMBER

    def __init__(self, message: str) -> None:
        super().__init__(message)
