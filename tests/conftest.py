import os

# Configure the application before it is imported by any test module
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("EXTERNAL_SERVICE_URL", None)

from typing import Callable, List

import httpx
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.config import ExternalServiceConfig
from app.models import user_submission  # noqa: F401

ENDPOINT_URL = "https://api.example.com/submissions"

PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChAI9jU77ygAAAABJRU5ErkJggg=="
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def candidate() -> dict:
    return {
        "email": "test@example.com",
        "picture_data": PNG_BASE64,
        "picture_filename": "p.png",
        "picture_mime_type": "image/png",
    }


@pytest.fixture
def config() -> ExternalServiceConfig:
    return ExternalServiceConfig(endpoint_url=ENDPOINT_URL, timeout_ms=100)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it was asked to send."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def respond_with():
    def factory(status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json={"success": status_code < 300}))
    return factory


@pytest.fixture
def raise_on_send():
    def factory(exc_type: type) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)
        return RecordingTransport(handler)
    return factory
