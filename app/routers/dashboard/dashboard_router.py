from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.dashboard.dashboard_schemas import DashboardMetrics, DashboardCharts
from app.services.dashboard.dashboard_service import get_metrics, get_charts
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = get_logger(__name__)


@router.get("/metrics", response_model=APIResponse[DashboardMetrics])
async def dashboard_metrics_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Dashboard metrics requested", extra={"actor_id": user.id})
    metrics = await get_metrics(db)
    return success_response("Dashboard metrics fetched", metrics)


@router.get("/charts", response_model=APIResponse[DashboardCharts])
async def dashboard_charts_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Dashboard charts requested", extra={"actor_id": user.id})
    charts = await get_charts(db)
    return success_response("Dashboard charts fetched", charts)
