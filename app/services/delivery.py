import httpx
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from typing import Optional

from ..config import ExternalServiceConfig
from ..models.user_submission import UserSubmission
from ..utils.logger import get_logger
from .submission_store import SubmissionStore

logger = get_logger("delivery")


class DeliveryFailure(str, Enum):
    NOT_CONFIGURED = "not_configured"
    INVALID_CONFIG = "invalid_config"
    HTTP_STATUS = "http_status"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    STORAGE = "storage"


@dataclass
class DeliveryResult:
    submission_id: int
    failure: Optional[DeliveryFailure] = None
    status_code: Optional[int] = None
    detail: str = ""

    @property
    def sent(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.sent


def isoformat_utc(value: datetime) -> str:
    # Naive timestamps read back from the database are stored in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def build_payload(submission: UserSubmission) -> dict:
    return {
        "email": submission.email,
        "picture_data": submission.picture_data,
        "picture_filename": submission.picture_filename,
        "picture_mime_type": submission.picture_mime_type,
        "submitted_at": isoformat_utc(submission.submitted_at),
    }


class ExternalDeliveryService:
    """Forwards stored submissions to the external processing service.

    Every call makes at most one POST and is never retried here; failures are
    reported through DeliveryResult and leave external_request_sent untouched.
    The configured timeout bounds the whole request, body included.
    """

    def __init__(
        self,
        session: Session,
        config: ExternalServiceConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.store = SubmissionStore(session)
        self.config = config
        self.transport = transport

    def _post(self, payload: dict) -> httpx.Response:
        deadline = time.monotonic() + self.config.timeout_seconds
        with httpx.Client(timeout=self.config.timeout_seconds, transport=self.transport) as client:
            with client.stream(
                "POST",
                str(self.config.endpoint_url),
                json=payload,
                headers={"Content-Type": "application/json"},
            ) as response:
                # Per-phase timeouts restart on every chunk, so check the overall deadline too
                for _ in response.iter_bytes():
                    if time.monotonic() > deadline:
                        break
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"No complete response within {self.config.timeout_ms} ms",
                        request=response.request,
                    )
                return response

    def send(self, submission: UserSubmission) -> DeliveryResult:
        if not self.config.endpoint_url:
            logger.error("EXTERNAL_SERVICE_URL is not set, submission %s not sent", submission.id)
            return DeliveryResult(submission.id, DeliveryFailure.NOT_CONFIGURED)

        try:
            response = self._post(build_payload(submission))
        except httpx.InvalidURL as e:
            logger.error("EXTERNAL_SERVICE_URL is not a valid URL, submission %s not sent: %s", submission.id, e)
            return DeliveryResult(submission.id, DeliveryFailure.INVALID_CONFIG, detail=str(e))
        except httpx.TimeoutException as e:
            logger.error("External service request timed out for submission %s: %s", submission.id, e)
            return DeliveryResult(submission.id, DeliveryFailure.TIMEOUT, detail=str(e))
        except httpx.HTTPError as e:
            logger.error("External service request failed for submission %s: %s", submission.id, e)
            return DeliveryResult(submission.id, DeliveryFailure.TRANSPORT, detail=str(e))
        except Exception as e:
            logger.exception("Unexpected error sending submission %s", submission.id)
            return DeliveryResult(submission.id, DeliveryFailure.TRANSPORT, detail=str(e))

        if not response.is_success:
            logger.error(
                "External service request failed with status %s: %s",
                response.status_code, response.reason_phrase,
            )
            return DeliveryResult(
                submission.id, DeliveryFailure.HTTP_STATUS,
                status_code=response.status_code, detail=response.reason_phrase,
            )

        try:
            recorded = self.store.mark_external_request_sent(submission.id)
        except SQLAlchemyError as e:
            logger.error("Could not record delivery of submission %s: %s", submission.id, e)
            return DeliveryResult(
                submission.id, DeliveryFailure.STORAGE,
                status_code=response.status_code, detail=str(e),
            )
        if not recorded:
            logger.error("Submission %s was accepted but no longer exists in the store", submission.id)
            return DeliveryResult(
                submission.id, DeliveryFailure.STORAGE,
                status_code=response.status_code, detail="submission not found",
            )

        logger.info("Successfully sent submission %s to external service", submission.id)
        return DeliveryResult(submission.id, status_code=response.status_code)

    def deliver(self, submission: UserSubmission) -> bool:
        return self.send(submission).sent
