"""Feedback repositories."""

from typing import Any

from ...core.exceptions import ValidationError
from ...core.pagination import ListOptions, Page
from ...core.repositories import (
    SET_NULL,
    DocumentRepository,
    ForeignKey,
    Repository,
    SQLRepository,
)
from .models import Feedback
from .schemas import FeedbackCreate, FeedbackResponse, FeedbackUpdate


class FeedbackRepository(Repository[FeedbackResponse]):
    resource_type = "Feedback"
    create_schema = FeedbackCreate
    update_schema = FeedbackUpdate
    read_schema = FeedbackResponse
    relations = {
        "from_user": ("from_user_id", "users"),
        "to_user": ("to_user_id", "users"),
    }

    def validate_record(self, record: dict[str, Any]) -> None:
        if record.get("from_user_id") == record.get("to_user_id"):
            raise ValidationError("cannot leave feedback for yourself", field="to_user_id")

    async def find_received_by_user(
        self, user_id: str, options: ListOptions | None = None
    ) -> Page[FeedbackResponse]:
        return await self.list((options or ListOptions()).with_filters(to_user_id=user_id))

    async def find_given_by_user(
        self, user_id: str, options: ListOptions | None = None
    ) -> Page[FeedbackResponse]:
        return await self.list((options or ListOptions()).with_filters(from_user_id=user_id))


class SQLFeedbackRepository(SQLRepository[FeedbackResponse], FeedbackRepository):
    model = Feedback


class DocumentFeedbackRepository(DocumentRepository[FeedbackResponse], FeedbackRepository):
    collection = "feedback"
    required_fields = ("from_user_id", "to_user_id", "thumbs_up")
    foreign_keys = {
        "from_user_id": ForeignKey("users"),
        "to_user_id": ForeignKey("users"),
        "lease_id": ForeignKey("leases", on_delete=SET_NULL),
    }
