"""FastAPI application entrypoint for the envelope service."""

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import Response

from api_envelope.core.handlers import register_error_handlers
from api_envelope.responses.builder import ResponseBuilder
from api_envelope.responses.builder import get_response_builder

app = FastAPI(title="API Envelope")
register_error_handlers(app)


@app.get("/health")
def health(request: Request, builder: ResponseBuilder = Depends(get_response_builder)) -> Response:
    """Health check endpoint for service readiness."""
    return builder.success({"status": "ok"}, request).send()
