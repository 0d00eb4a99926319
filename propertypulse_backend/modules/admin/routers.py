"""Database administration API routes."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from ...core.repository_factory import DatabaseTarget
from ..auth.dependencies import AdminUser, Factory
from ..commons import BaseResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/database", tags=["Admin"])


class SwitchDatabaseRequest(BaseModel):
    target: DatabaseTarget


@router.get("/info", response_model=BaseResponse[dict])
async def get_database_info(current_user: AdminUser, factory: Factory):
    """Active target, configured targets and loaded repositories."""
    return BaseResponse(success=True, data=factory.database_info())


@router.post("/switch", response_model=BaseResponse[dict])
async def switch_database(
    data: SwitchDatabaseRequest, current_user: AdminUser, factory: Factory
):
    """Point repositories handed out from now on at another target."""
    logger.info(
        "Database switch requested",
        extra={"user_id": current_user.id, "target": data.target.value},
    )
    result = await factory.switch_database(data.target)
    return BaseResponse(success=True, message=result["message"], data=result)


@router.get("/health", response_model=BaseResponse[dict])
async def check_database_health(current_user: AdminUser, factory: Factory):
    return BaseResponse(success=True, data=await factory.health_check())


@router.get("/health-history", response_model=BaseResponse[dict])
async def get_health_history(current_user: AdminUser, factory: Factory):
    """The most recent health check results."""
    return BaseResponse(success=True, data=factory.health_history())
