"""Ordered rules mapping a raised error to a status code and title."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass

from fastapi import status

from api_envelope.core.errors import ErrorKind
from api_envelope.core.errors import is_kind

INTERNAL_SERVER_ERROR_TITLE = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class ClassificationRule:
    """One classification step; the first rule whose predicate matches wins."""

    name: str
    matches: Callable[[BaseException], bool]
    status_code: int
    title: str


FALLBACK_RULE = ClassificationRule(
    name="internal",
    matches=lambda error: True,
    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    title=INTERNAL_SERVER_ERROR_TITLE,
)


def error_message(error: BaseException) -> str:
    """Return the human message of ``error``."""
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)


def _kind_rule(name: str, kind: ErrorKind, status_code: int, title: str) -> ClassificationRule:
    return ClassificationRule(
        name=name,
        matches=lambda error: is_kind(error, kind),
        status_code=status_code,
        title=title,
    )


def _message_contains(patterns: Sequence[str]) -> Callable[[BaseException], bool]:
    frozen = tuple(patterns)

    def matches(error: BaseException) -> bool:
        message = error_message(error)
        return any(pattern in message for pattern in frozen)

    return matches


def default_rules(conflict_patterns: Sequence[str]) -> tuple[ClassificationRule, ...]:
    """Build the standard rule chain, ending in the 500 catch-all."""
    return (
        _kind_rule("bad_request", ErrorKind.BAD_REQUEST, status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
        _kind_rule("no_permission", ErrorKind.NO_PERMISSION, status.HTTP_401_UNAUTHORIZED, "no permission"),
        _kind_rule("not_found", ErrorKind.NOT_FOUND, status.HTTP_404_NOT_FOUND, "NOT FOUND"),
        ClassificationRule(
            name="assertion",
            matches=lambda error: isinstance(error, AssertionError),
            status_code=status.HTTP_400_BAD_REQUEST,
            title="BAD REQUEST",
        ),
        _kind_rule(
            "not_implemented",
            ErrorKind.NOT_IMPLEMENTED,
            status.HTTP_501_NOT_IMPLEMENTED,
            "NOT IMPLEMENTED",
        ),
        ClassificationRule(
            name="constraint_violation_message",
            matches=_message_contains(conflict_patterns),
            status_code=status.HTTP_409_CONFLICT,
            title="conflict data provided",
        ),
        FALLBACK_RULE,
    )


def classify(error: BaseException, rules: Sequence[ClassificationRule]) -> ClassificationRule:
    """Return the first rule matching ``error``.

    Falls back to a 500 rule when no rule in ``rules`` matches.
    """
    for rule in rules:
        if rule.matches(error):
            return rule
    return FALLBACK_RULE
