from datetime import datetime, time, timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.audit.activity_models import ActivityLog
from app.schemas.auth.activity_schemas import (
    ActivityOut,
    ActivityFilters,
    ActivityListData,
)
from app.utils.response import page_meta
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def list_activities(
    *,
    db: AsyncSession,
    filters: ActivityFilters,
) -> ActivityListData:
    query = select(ActivityLog)

    if filters.user_id:
        query = query.where(ActivityLog.user_id == filters.user_id)

    if filters.code:
        query = query.where(ActivityLog.code == filters.code.value)

    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.where(
            ActivityLog.message.ilike(pattern) | ActivityLog.actor_email.ilike(pattern)
        )

    # date bounds are whole days
    if filters.date_from:
        query = query.where(
            ActivityLog.created_at >= datetime.combine(filters.date_from, time.min)
        )
    if filters.date_to:
        query = query.where(
            ActivityLog.created_at
            < datetime.combine(filters.date_to + timedelta(days=1), time.min)
        )

    total = await db.scalar(
        select(func.count()).select_from(query.subquery())
    ) or 0

    query = (
        query
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(filters.page_size)
        .offset((filters.page - 1) * filters.page_size)
    )

    activities = (await db.execute(query)).scalars().all()

    logger.info(
        "Activities fetched",
        extra={"total": total, "page": filters.page, "code": filters.code},
    )

    return ActivityListData(
        **page_meta(total, filters.page, filters.page_size),
        items=[ActivityOut.model_validate(a) for a in activities],
    )
