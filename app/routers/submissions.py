from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from ..config import ExternalServiceConfig, get_external_service_config
from ..database import get_session
from ..models.user_submission import SubmissionRequest, SubmissionResponse, UserSubmissionPublic
from ..services.pipeline import SubmissionPipeline
from ..services.submission_query import SubmissionQueryService

router = APIRouter(
    prefix="/submissions",
    tags=["Submissions"]
)


def get_pipeline(
    session: Session = Depends(get_session),
    config: ExternalServiceConfig = Depends(get_external_service_config),
) -> SubmissionPipeline:
    return SubmissionPipeline.for_session(session, config)


@router.post("/", response_model=SubmissionResponse)
def submit_email_and_picture(
    request: SubmissionRequest,
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    return pipeline.submit(request)


# Admin view of all submissions
@router.get("/", response_model=List[UserSubmissionPublic])
def get_user_submissions(session: Session = Depends(get_session)):
    return SubmissionQueryService(session).list()
