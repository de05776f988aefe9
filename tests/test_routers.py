import pytest
from fastapi.testclient import TestClient

from app.config import ExternalServiceConfig
from app.database import get_session
from app.main import app
from app.routers.submissions import get_pipeline
from app.services.pipeline import SubmissionPipeline

from conftest import ENDPOINT_URL


@pytest.fixture
def client(session, respond_with):
    transport = respond_with(200)

    def override_session():
        yield session

    def override_pipeline():
        return SubmissionPipeline.for_session(
            session, ExternalServiceConfig(endpoint_url=ENDPOINT_URL), transport
        )

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_pipeline] = override_pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client) -> None:
    response = client.get("/")
    assert response.status_code == 200


def test_healthcheck(client) -> None:
    body = client.get("/healthcheck").json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_submit_and_list(client, candidate) -> None:
    response = client.post("/submissions/", json=candidate)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Thanks! You'll receive your picture by email soon!"
    assert body["submission_id"] > 0

    listed = client.get("/submissions/").json()
    assert len(listed) == 1
    assert listed[0]["id"] == body["submission_id"]
    assert listed[0]["email"] == candidate["email"]
    assert listed[0]["processed"] is False
    assert listed[0]["external_request_sent"] is True


def test_invalid_submission_gets_generic_failure(client, candidate) -> None:
    del candidate["email"]
    response = client.post("/submissions/", json=candidate)

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Failed to process your submission. Please try again.",
        "submission_id": 0,
    }
    assert client.get("/submissions/").json() == []


@pytest.mark.parametrize("field, value", [("email", 123), ("picture_data", ["a", "b"]), ("picture_mime_type", {"type": "image/png"})])
def test_wrongly_typed_field_gets_generic_failure(client, candidate, field, value) -> None:
    candidate[field] = value
    response = client.post("/submissions/", json=candidate)

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["submission_id"] == 0
