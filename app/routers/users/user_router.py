from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.users.user_models import User
from app.schemas.users.user_schemas import (
    UserCreateSchema,
    UserUpdateSchema,
    UserListFilters,
    VersionOnlySchema,
    UserDetailSchema,
    UserListResponseSchema,
)
from app.services.users.user_services import (
    create_user,
    list_users,
    get_user_by_id,
    update_user,
    deactivate_user,
    reactivate_user,
)
from app.utils.check_roles import require_admin
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/users", tags=["Users"])
logger = get_logger(__name__)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[UserDetailSchema],
)
async def create_user_api(
    payload: UserCreateSchema,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("Create user request", extra={"email": payload.email})
    user = await create_user(db, payload, admin)
    return success_response("User created successfully", user)


@router.get("/", response_model=APIResponse[UserListResponseSchema])
async def list_users_api(
    filters: UserListFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("List users request", extra=filters.model_dump())
    users = await list_users(db, filters)
    return success_response("Users fetched", users)


@router.get("/{user_id}", response_model=APIResponse[UserDetailSchema])
async def get_user_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("Get user by id", extra={"user_id": user_id})
    user = await get_user_by_id(db, user_id)
    return success_response("User fetched", user)


@router.patch("/{user_id}", response_model=APIResponse[UserDetailSchema])
async def update_user_api(
    user_id: int,
    payload: UserUpdateSchema,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("Update user", extra={"user_id": user_id})
    user = await update_user(db, user_id, payload, admin)
    return success_response("User updated successfully", user)


@router.delete("/{user_id}", response_model=APIResponse[UserDetailSchema])
async def deactivate_user_api(
    user_id: int,
    payload: VersionOnlySchema,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("Deactivate user", extra={"user_id": user_id})
    user = await deactivate_user(db, user_id, payload.version, admin)
    return success_response("User deactivated successfully", user)


@router.post("/{user_id}/activate", response_model=APIResponse[UserDetailSchema])
async def reactivate_user_api(
    user_id: int,
    payload: VersionOnlySchema,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    logger.info("Reactivate user", extra={"user_id": user_id})
    user = await reactivate_user(db, user_id, payload.version, admin)
    return success_response("User reactivated successfully", user)
