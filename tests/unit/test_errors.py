"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from api_envelope.core.errors import REFINES
from api_envelope.core.errors import BadDeveloperError
from api_envelope.core.errors import BadRequestError
from api_envelope.core.errors import ConflictError
from api_envelope.core.errors import ErrorKind
from api_envelope.core.errors import InternalError
from api_envelope.core.errors import InvalidFormatError
from api_envelope.core.errors import InvalidPhoneNumberError
from api_envelope.core.errors import NoPermissionError
from api_envelope.core.errors import NotFoundError
from api_envelope.core.errors import NotImplementedAPIError
from api_envelope.core.errors import error_kind
from api_envelope.core.errors import is_kind
from api_envelope.core.errors import refines
from api_envelope.schemas.envelope import FieldIssue


def test_refines_walks_specialization_chain() -> None:
    assert refines(ErrorKind.INVALID_PHONE_NUMBER, ErrorKind.INVALID_FORMAT)
    assert refines(ErrorKind.INVALID_PHONE_NUMBER, ErrorKind.BAD_REQUEST)
    assert refines(ErrorKind.INVALID_FORMAT, ErrorKind.BAD_REQUEST)
    assert refines(ErrorKind.BAD_REQUEST, ErrorKind.BAD_REQUEST)


def test_refines_does_not_generalize_downwards_or_sideways() -> None:
    assert not refines(ErrorKind.BAD_REQUEST, ErrorKind.INVALID_FORMAT)
    assert not refines(ErrorKind.NOT_FOUND, ErrorKind.BAD_REQUEST)
    assert not refines(ErrorKind.CONFLICT, ErrorKind.INTERNAL)
    assert set(REFINES) == {ErrorKind.INVALID_FORMAT, ErrorKind.INVALID_PHONE_NUMBER}


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (BadRequestError("m"), ErrorKind.BAD_REQUEST),
        (InvalidFormatError("m"), ErrorKind.INVALID_FORMAT),
        (InvalidPhoneNumberError("m"), ErrorKind.INVALID_PHONE_NUMBER),
        (ConflictError("m"), ErrorKind.CONFLICT),
        (NoPermissionError("m"), ErrorKind.NO_PERMISSION),
        (NotFoundError("m"), ErrorKind.NOT_FOUND),
        (NotImplementedAPIError("m"), ErrorKind.NOT_IMPLEMENTED),
        (BadDeveloperError("m"), ErrorKind.BAD_DEVELOPER),
        (InternalError("m"), ErrorKind.INTERNAL),
    ],
)
def test_each_variant_carries_its_tag(error: Exception, kind: ErrorKind) -> None:
    assert error_kind(error) is kind
    assert error.type_name == kind.value


def test_foreign_errors_carry_no_tag() -> None:
    assert error_kind(ValueError("boom")) is None
    assert not is_kind(ValueError("boom"), ErrorKind.BAD_REQUEST)


def test_is_kind_reads_the_tag_not_the_class() -> None:
    class Impostor(Exception):
        kind = ErrorKind.NOT_FOUND

    assert is_kind(Impostor(), ErrorKind.NOT_FOUND)
    assert is_kind(InvalidPhoneNumberError("bad"), ErrorKind.BAD_REQUEST)


def test_message_decorations() -> None:
    assert NoPermissionError("delete user").message == "OPERATION PERMISSION DENIED:: delete user"
    assert BadDeveloperError("missing arg").message == (
        "BAD_DEVELOPER_EXCEPTION:: seems like you made a mistake! : missing arg"
    )
    assert str(NotFoundError("user 7")) == "user 7"


def test_field_issues_are_coerced_and_frozen() -> None:
    error = InvalidFormatError(
        "invalid payload",
        field_issues=[{"field": "phone", "required": True}, FieldIssue(field="email", type="email")],
    )

    assert error.field_issues == (
        FieldIssue(field="phone", required=True),
        FieldIssue(field="email", type="email"),
    )
    assert isinstance(error.field_issues, tuple)
    with pytest.raises(AttributeError):
        error.message = "other"  # type: ignore[misc]


def test_bad_request_to_data_without_issues() -> None:
    body = BadRequestError("name is required").to_data()

    assert body.type == "BAD_REQUEST"
    assert body.title == "name is required"
    assert body.detail == "name is required"
    assert body.status == 400
    assert body.data is None


def test_invalid_format_to_data_exposes_field_issues() -> None:
    body = InvalidFormatError("invalid payload", field_issues=[{"field": "phone", "required": True}]).to_data()

    assert body.type == "INVALID_FORMAT"
    assert body.status == 400
    assert body.data == {"fields": [{"field": "phone", "required": True}]}


def test_invalid_phone_number_is_a_bad_request_without_issues() -> None:
    error = InvalidPhoneNumberError("+1 bad")

    assert error.field_issues == ()
    assert error.detail_data() is None
    assert error.to_data().status == 400
