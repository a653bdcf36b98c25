from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Literal
from datetime import datetime
from fastapi import Query


Role = Literal["admin", "user"]


# =========================
# CREATE / UPDATE
# =========================
class UserCreateSchema(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = "user"


class UserUpdateSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    version: int


class VersionOnlySchema(BaseModel):
    version: int


# =========================
# LIST FILTERS
# =========================
class UserListFilters(BaseModel):
    search: Optional[str] = Query(None)
    role: Optional[str] = Query(None)
    is_active: Optional[bool] = Query(None)
    sort_by: str = Query("created_at")
    sort_order: str = Query("desc")
    page: int = Query(1, ge=1)
    page_size: int = Query(20, ge=1, le=100)


# =========================
# RESPONSE SCHEMAS
# =========================
class UserDetailSchema(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]
    version: int

    model_config = {"from_attributes": True}


class UserListResponseSchema(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int
    items: List[UserDetailSchema]
