from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from typing import Any, Mapping, Union

from ..models.user_submission import UserSubmission, UserSubmissionCreate
from ..utils.logger import get_logger
from .exceptions import SubmissionStorageError, SubmissionValidationError
from .submission_store import SubmissionStore

logger = get_logger("intake")

Candidate = Union[Mapping[str, Any], BaseModel]


class IntakeService:
    def __init__(self, session: Session):
        self.store = SubmissionStore(session)

    def validate(self, candidate: Candidate) -> UserSubmissionCreate:
        if isinstance(candidate, UserSubmissionCreate):
            return candidate
        if isinstance(candidate, BaseModel):
            candidate = candidate.model_dump()
        try:
            return UserSubmissionCreate.model_validate(candidate)
        except ValidationError as e:
            raise SubmissionValidationError(e.errors(include_url=False, include_input=False))

    def create(self, candidate: Candidate) -> UserSubmission:
        try:
            data = self.validate(candidate)
        except SubmissionValidationError as e:
            logger.info("Declined submission: %s", e.errors)
            raise

        # submitted_at, processed and external_request_sent use their defaults
        submission = UserSubmission(
            email=data.email,
            picture_data=data.picture_data,
            picture_filename=data.picture_filename,
            picture_mime_type=data.picture_mime_type,
        )
        try:
            submission = self.store.insert(submission)
        except SQLAlchemyError as e:
            logger.error("User submission creation failed: %s", e)
            raise SubmissionStorageError(str(e)) from e

        logger.info("Created submission %s", submission.id)
        return submission
