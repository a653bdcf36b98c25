from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
)
from app.services.masters.category_service import (
    create_category,
    list_categories,
    get_category,
    update_category,
    delete_category,
)
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/categories", tags=["Categories"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[CategoryListData])
async def list_categories_api(
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_categories(db, include_inactive=include_inactive)
    return success_response("Categories fetched successfully", data)


@router.get("/{category_id}", response_model=APIResponse[CategoryOut])
async def get_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    category = await get_category(db, category_id)
    return success_response("Category fetched successfully", category)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[CategoryOut],
)
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Create category", extra={"category_name": payload.name})

    category = await create_category(db, payload, user)
    return success_response("Category created successfully", category)


@router.patch("/{category_id}", response_model=APIResponse[CategoryOut])
async def update_category_api(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update category", extra={"category_id": category_id})

    category = await update_category(db, category_id, payload, user)
    return success_response("Category updated successfully", category)


@router.delete("/{category_id}", response_model=APIResponse)
async def delete_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete category", extra={"category_id": category_id})

    await delete_category(db, category_id, user)
    return success_response("Category deleted successfully")
