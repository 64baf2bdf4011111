"""Response envelope schemas shared across API handlers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class FieldIssue(BaseModel):
    """Single field-level format or validation issue."""

    model_config = ConfigDict(frozen=True)

    field: str
    type: str | None = None
    required: bool | None = None
    message: str | None = None

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ErrorBody(BaseModel):
    """Normalized description of a failure embedded in an envelope."""

    model_config = ConfigDict(frozen=True)

    type: str
    title: str
    detail: str
    status: int
    data: Any = None


class RequestInformation(BaseModel):
    """Inbound request metadata echoed back to the client."""

    model_config = ConfigDict(frozen=True)

    url: str


class Envelope(BaseModel):
    """Canonical response wrapper returned for every request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    model: str
    data: Any = None
    action: str | None = None
    error: ErrorBody | None = None
    request: RequestInformation | None = None
    status: int
    has_more: bool | None = Field(default=None, alias="hasMore")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready wire form, omitting unset optional keys."""
        payload = self.model_dump(mode="json", by_alias=True)
        if self.request is None:
            payload.pop("request")
        if self.has_more is None:
            payload.pop("hasMore")
        if self.error is not None and self.error.data is None:
            payload["error"].pop("data")
        return payload
