"""Rental application repositories.

Once an application has been reviewed its contents are frozen; only the
review notes may still change.
"""

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
from ...core.utils import utc_now
from .models import Application, ApplicationStatus
from .schemas import ApplicationCreate, ApplicationResponse, ApplicationUpdate

PENDING = ApplicationStatus.PENDING.value
REVIEWED = {ApplicationStatus.APPROVED.value, ApplicationStatus.DECLINED.value}


class ApplicationRepository(Repository[ApplicationResponse]):
    resource_type = "Application"
    create_schema = ApplicationCreate
    update_schema = ApplicationUpdate
    read_schema = ApplicationResponse
    relations = {
        "property": ("property_id", "properties"),
        "applicant": ("applicant_id", "users"),
    }
    search_fields = ("first_name", "last_name", "email")
    status_transitions = {PENDING: REVIEWED}

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values["status"] = PENDING
        return values

    def prepare_update(self, current, changes):
        current_status = getattr(current.get("status"), "value", current.get("status"))
        if current_status != PENDING:
            frozen = {
                name
                for name, value in changes.items()
                if name != "review_notes" and value != current.get(name)
            }
            if frozen:
                raise ValidationError(
                    "only review_notes may change after review",
                    field=sorted(frozen)[0],
                )
        elif changes.get("status") in REVIEWED:
            changes["reviewed_at"] = utc_now()
        return changes

    async def find_by_property_id(
        self,
        property_id: str,
        status: ApplicationStatus | str | None = None,
        search: str | None = None,
        options: ListOptions | None = None,
    ) -> Page[ApplicationResponse]:
        """Applications for a property, optionally narrowed by status and a name/email search."""
        options = (options or ListOptions()).with_filters(property_id=property_id, status=status)
        if search:
            options = options.model_copy(update={"search": search})
        return await self.list(options)

    async def find_by_applicant_id(
        self, applicant_id: str, options: ListOptions | None = None
    ) -> Page[ApplicationResponse]:
        return await self.list((options or ListOptions()).with_filters(applicant_id=applicant_id))

    async def count_by_property(
        self, property_id: str, status: ApplicationStatus | str | None = None
    ) -> int:
        return await self.count({"property_id": property_id, "status": status})

    async def review(
        self,
        id: str,
        status: ApplicationStatus | str,
        review_notes: str | None = None,
    ) -> ApplicationResponse | None:
        """Approve or decline a pending application."""
        status = getattr(status, "value", status)
        if status not in REVIEWED:
            raise ValidationError("must be APPROVED or DECLINED", field="status", value=status)
        patch = {"status": status}
        if review_notes is not None:
            patch["review_notes"] = review_notes
        return await self.update(id, patch)


class SQLApplicationRepository(SQLRepository[ApplicationResponse], ApplicationRepository):
    model = Application


class DocumentApplicationRepository(
    DocumentRepository[ApplicationResponse], ApplicationRepository
):
    collection = "applications"
    required_fields = ("property_id", "first_name", "last_name", "email")
    foreign_keys = {
        "property_id": ForeignKey("properties"),
        "applicant_id": ForeignKey("users", on_delete=SET_NULL),
    }
