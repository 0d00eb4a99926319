"""Feedback schemas for PropertyPulse."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..commons import UserSummary


class FeedbackCreate(BaseModel):
    from_user_id: str
    to_user_id: str
    lease_id: str | None = None
    thumbs_up: bool
    comment: str | None = Field(None, max_length=2000)


class FeedbackUpdate(BaseModel):
    thumbs_up: bool | None = None
    comment: str | None = Field(None, max_length=2000)


class FeedbackResponse(FeedbackCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    from_user: UserSummary | None = None
    to_user: UserSummary | None = None
    created_at: datetime
    updated_at: datetime
