from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from .base import ApiModel
from .software import AccessLevel, SoftwareOut
from .user import UserPublicOut, UserRefOut


class RequestCreateIn(ApiModel):
    software_id: int = Field(ge=1)
    access_type: AccessLevel
    reason: str = Field(min_length=1)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason is required")
        return v


class RequestStatusUpdateIn(ApiModel):
    status: Literal["Approved", "Rejected"]
    review_comment: str | None = None


class RequestOut(ApiModel):
    id: int
    user_id: int
    software_id: int
    access_type: str
    reason: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    reviewed_by: int | None = None
    review_comment: str | None = None
    software: SoftwareOut | None = None
    user: UserPublicOut | None = None


class RequestReviewOut(ApiModel):
    """Result of a review; the requester is reduced to id and username."""

    id: int
    status: str
    access_type: str
    reason: str
    software: SoftwareOut | None = None
    user: UserRefOut
    reviewed_by: int | None = None
    review_comment: str | None = None
    updated_at: datetime | None = None
