from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.users.user_models import User
from app.schemas.auth.activity_schemas import ActivityFilters, ActivityListData
from app.services.auth.activity_service import list_activities
from app.utils.check_roles import require_admin
from app.utils.response import APIResponse, success_response

router = APIRouter(prefix="/activities", tags=["Activity Log"])


@router.get("/", response_model=APIResponse[ActivityListData])
async def list_activities_api(
    filters: ActivityFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    result = await list_activities(db=db, filters=filters)
    return success_response("Activity log fetched successfully", result)
