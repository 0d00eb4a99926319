"""Feedback API routes."""

from fastapi import APIRouter, status

from ...core.exceptions import NotFoundError
from ..auth.dependencies import CurrentUser, Factory, ensure_can_manage
from ..commons import BaseResponse, ListParams, PaginatedResponse
from .schemas import FeedbackCreate, FeedbackResponse, FeedbackUpdate

router = APIRouter(prefix="/feedback", tags=["Feedback"])


class FeedbackInput(FeedbackCreate):
    """Create payload; the author is always the caller."""

    from_user_id: str | None = None


@router.post(
    "",
    response_model=BaseResponse[FeedbackResponse],
    status_code=status.HTTP_201_CREATED,
)
async def leave_feedback(data: FeedbackInput, current_user: CurrentUser, factory: Factory):
    """Give a thumbs up or down to another user."""
    values = data.model_dump()
    values["from_user_id"] = current_user.id
    feedback = await factory.feedback().create(values)
    return BaseResponse(success=True, message="Feedback recorded", data=feedback)


@router.get("/received", response_model=BaseResponse[PaginatedResponse[FeedbackResponse]])
async def list_received_feedback(current_user: CurrentUser, factory: Factory, options: ListParams):
    page = await factory.feedback().find_received_by_user(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/given", response_model=BaseResponse[PaginatedResponse[FeedbackResponse]])
async def list_given_feedback(current_user: CurrentUser, factory: Factory, options: ListParams):
    page = await factory.feedback().find_given_by_user(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get(
    "/users/{user_id}", response_model=BaseResponse[PaginatedResponse[FeedbackResponse]]
)
async def list_user_feedback(
    user_id: str, current_user: CurrentUser, factory: Factory, options: ListParams
):
    """Feedback another user has received."""
    page = await factory.feedback().find_received_by_user(user_id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.patch("/{feedback_id}", response_model=BaseResponse[FeedbackResponse])
async def update_feedback(
    feedback_id: str, data: FeedbackUpdate, current_user: CurrentUser, factory: Factory
):
    feedback = await factory.feedback().find_by_id(feedback_id, populate=False)
    if not feedback:
        raise NotFoundError(f"Feedback with ID {feedback_id} not found")
    ensure_can_manage(current_user, feedback.from_user_id)
    feedback = await factory.feedback().update(feedback_id, data)
    return BaseResponse(success=True, message="Feedback updated", data=feedback)


@router.delete("/{feedback_id}", response_model=BaseResponse[None])
async def delete_feedback(feedback_id: str, current_user: CurrentUser, factory: Factory):
    feedback = await factory.feedback().find_by_id(feedback_id, populate=False)
    if not feedback:
        raise NotFoundError(f"Feedback with ID {feedback_id} not found")
    ensure_can_manage(current_user, feedback.from_user_id)
    await factory.feedback().delete(feedback_id)
    return BaseResponse(success=True, message="Feedback deleted")
