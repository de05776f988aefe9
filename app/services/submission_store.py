from sqlmodel import Session, select
from typing import List, Optional

from ..models.user_submission import UserSubmission


class SubmissionStore:
    """Row level access to the user_submissions table."""

    def __init__(self, session: Session):
        self.session = session

    def insert(self, submission: UserSubmission) -> UserSubmission:
        # Reload inside the transaction so the caller sees exactly what the
        # database stored, and a failed reload leaves no row behind
        try:
            self.session.add(submission)
            self.session.flush()
            self.session.refresh(submission)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return submission

    def get(self, submission_id: int) -> Optional[UserSubmission]:
        return self.session.get(UserSubmission, submission_id)

    def mark_external_request_sent(self, submission_id: int) -> bool:
        submission = self.get(submission_id)
        if not submission:
            return False

        # Only ever set to true, so repeating it leaves the same end state
        submission.external_request_sent = True
        try:
            self.session.add(submission)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return True

    def list_recent(self) -> List[UserSubmission]:
        return list(self.session.exec(
            select(UserSubmission)
            .order_by(UserSubmission.submitted_at.desc(), UserSubmission.id.desc())
        ).all())

    def list_pending_delivery(self, limit: Optional[int] = None) -> List[UserSubmission]:
        statement = (
            select(UserSubmission)
            .where(UserSubmission.external_request_sent == False)  # noqa: E712
            .order_by(UserSubmission.id)
        )
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.exec(statement).all())
