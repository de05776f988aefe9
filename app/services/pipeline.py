import httpx
from sqlmodel import Session
from typing import Optional

from ..config import ExternalServiceConfig
from ..models.user_submission import SubmissionResponse
from ..utils.logger import get_logger
from .delivery import ExternalDeliveryService
from .exceptions import SubmissionError
from .intake import Candidate, IntakeService

logger = get_logger("pipeline")

SUCCESS_MESSAGE = "Thanks! You'll receive your picture by email soon!"
FAILURE_MESSAGE = "Failed to process your submission. Please try again."


class SubmissionPipeline:
    def __init__(self, intake: IntakeService, delivery: ExternalDeliveryService):
        self.intake = intake
        self.delivery = delivery

    @classmethod
    def for_session(
        cls,
        session: Session,
        config: ExternalServiceConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "SubmissionPipeline":
        return cls(IntakeService(session), ExternalDeliveryService(session, config, transport))

    def submit(self, candidate: Candidate) -> SubmissionResponse:
        try:
            submission = self.intake.create(candidate)
        except SubmissionError:
            return SubmissionResponse(success=False, message=FAILURE_MESSAGE, submission_id=0)

        # The submission is stored at this point, a failed relay only shows in
        # its external_request_sent flag
        result = self.delivery.send(submission)
        if not result.sent:
            logger.warning(
                "External service request failed for submission %s (%s)",
                submission.id, result.failure.value,
            )

        return SubmissionResponse(success=True, message=SUCCESS_MESSAGE, submission_id=submission.id)
