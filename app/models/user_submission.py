from sqlmodel import SQLModel, Field
from sqlalchemy import Text
from sqlalchemy.dialects.mysql import LONGTEXT
from pydantic import BaseModel, field_validator
from email_validator import validate_email, EmailNotValidError
from typing import Any, Optional
from datetime import datetime, timezone
import re

IMAGE_MIME_TYPE = re.compile(r"^image/")

# Photos easily exceed the 64KB MySQL TEXT limit
PictureText = Text().with_variant(LONGTEXT(), "mysql")


class UserSubmissionBase(SQLModel):
    email: str = Field(sa_type=Text, nullable=False)
    picture_data: str = Field(sa_type=PictureText, nullable=False)  # Base64 encoded image data
    picture_filename: str = Field(sa_type=Text, nullable=False)
    picture_mime_type: str = Field(sa_type=Text, nullable=False)


class UserSubmission(UserSubmissionBase, table=True):
    __tablename__ = "user_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
    processed: bool = Field(default=False, nullable=False)
    external_request_sent: bool = Field(default=False, nullable=False)


class UserSubmissionCreate(BaseModel):
    email: str
    picture_data: str
    picture_filename: str
    picture_mime_type: str

    @field_validator("email")
    @classmethod
    def validate_email_syntax(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e))
        # Stored as given, not in normalized form
        return value

    @field_validator("picture_data", "picture_filename")
    @classmethod
    def not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("picture_mime_type")
    @classmethod
    def image_mime_type(cls, value: str) -> str:
        if not IMAGE_MIME_TYPE.match(value):
            raise ValueError("must be an image MIME type")
        return value


class UserSubmissionPublic(UserSubmissionBase):
    id: int
    submitted_at: datetime
    processed: bool
    external_request_sent: bool


class SubmissionRequest(BaseModel):
    # Left lenient so malformed input is declined by intake, not by the router
    email: Optional[Any] = None
    picture_data: Optional[Any] = None
    picture_filename: Optional[Any] = None
    picture_mime_type: Optional[Any] = None


class SubmissionResponse(BaseModel):
    success: bool
    message: str
    submission_id: int
