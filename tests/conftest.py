"""Shared pytest fixtures for envelope test suites."""

from collections.abc import Generator
from pathlib import Path
import sys
from typing import Any

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class RecordingSink:
    """Logging sink capturing calls instead of writing them anywhere."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, tuple[Any, ...], dict[str, Any]]] = []

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("error", msg, args, kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("warning", msg, args, kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("exception", msg, args, kwargs))

    def levels(self) -> list[str]:
        return [record[0] for record in self.records]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def builder(sink: RecordingSink):
    """Builder with default settings and a recording sink."""
    from api_envelope.core.config import EnvelopeSettings
    from api_envelope.responses.builder import ResponseBuilder

    return ResponseBuilder(logger=sink, settings=EnvelopeSettings())


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for contract suites."""
    from api_envelope.main import app

    with TestClient(app) as test_client:
        yield test_client
