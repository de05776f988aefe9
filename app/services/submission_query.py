from sqlmodel import Session
from typing import List

from ..models.user_submission import UserSubmission
from .submission_store import SubmissionStore


class SubmissionQueryService:
    def __init__(self, session: Session):
        self.store = SubmissionStore(session)

    def list(self) -> List[UserSubmission]:
        """All submissions, most recently submitted first (ties by newest id)."""
        return self.store.list_recent()
