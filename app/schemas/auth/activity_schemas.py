from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from fastapi import Query

from app.constants.activity_codes import ActivityCode


class ActivityFilters(BaseModel):
    user_id: Optional[int] = Query(None)
    code: Optional[ActivityCode] = Query(None)
    search: Optional[str] = Query(None)
    date_from: Optional[date] = Query(None)
    date_to: Optional[date] = Query(None)

    page: int = Query(1, ge=1)
    page_size: int = Query(20, ge=1, le=100)


class ActivityOut(BaseModel):
    id: int
    user_id: Optional[int]
    actor_email: str
    code: ActivityCode
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityListData(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[ActivityOut]
