from dataclasses import dataclass
from sqlmodel import Session
from typing import Optional

from ..services.delivery import ExternalDeliveryService
from ..services.submission_store import SubmissionStore
from ..utils.logger import get_logger

logger = get_logger("redelivery")


@dataclass
class RedeliverySummary:
    attempted: int = 0
    delivered: int = 0
    failed: int = 0


def resend_pending_submissions(
    session: Session,
    delivery: ExternalDeliveryService,
    limit: Optional[int] = None,
) -> RedeliverySummary:
    """Retry delivery for submissions whose external request was never confirmed"""
    summary = RedeliverySummary()

    pending = SubmissionStore(session).list_pending_delivery(limit=limit)
    for submission in pending:
        summary.attempted += 1
        result = delivery.send(submission)
        if result.sent:
            summary.delivered += 1
        else:
            summary.failed += 1

    logger.info(
        "Redelivery sweep: %s attempted, %s delivered, %s failed",
        summary.attempted, summary.delivered, summary.failed,
    )
    return summary
