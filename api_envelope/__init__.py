"""Error taxonomy and canonical response envelopes for HTTP APIs."""

from api_envelope.core import errors
from api_envelope.responses.builder import ResponseBuilder
from api_envelope.responses.builder import get_response_builder

__all__ = ["ResponseBuilder", "errors", "get_response_builder"]
