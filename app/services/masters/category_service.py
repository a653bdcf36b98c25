from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError

from app.models.masters.category_models import Category
from app.models.expenses.expense_models import Expense
from app.models.users.user_models import User
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_user_activity
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _name_taken(db: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(Category.id).where(func.lower(Category.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    return bool(await db.scalar(stmt))


async def _get_or_404(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise AppException.not_found("Category", ErrorCode.CATEGORY_NOT_FOUND)
    return category


# =========================
# CREATE
# =========================
async def create_category(db: AsyncSession, payload: CategoryCreate, user: User) -> CategoryOut:
    if await _name_taken(db, payload.name):
        raise AppException(409, "Category already exists", ErrorCode.CATEGORY_NAME_EXISTS)

    category = Category(**payload.model_dump())
    category.name = category.name.strip()
    db.add(category)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AppException(409, "Category already exists", ErrorCode.CATEGORY_NAME_EXISTS)

    await emit_user_activity(
        db,
        user,
        ActivityCode.CREATE_CATEGORY,
        target_name=category.name,
    )

    await db.commit()
    await db.refresh(category)

    logger.info("Category created", extra={"category_id": category.id})
    return CategoryOut.model_validate(category)


# =========================
# LIST / GET
# =========================
async def list_categories(db: AsyncSession, include_inactive: bool = False) -> CategoryListData:
    stmt = select(Category).order_by(Category.name)
    if not include_inactive:
        stmt = stmt.where(Category.is_active.is_(True))

    categories = (await db.execute(stmt)).scalars().all()

    return CategoryListData(
        total=len(categories),
        items=[CategoryOut.model_validate(c) for c in categories],
    )


async def get_category(db: AsyncSession, category_id: int) -> CategoryOut:
    return CategoryOut.model_validate(await _get_or_404(db, category_id))


# =========================
# UPDATE
# =========================
async def update_category(
    db: AsyncSession,
    category_id: int,
    payload: CategoryUpdate,
    user: User,
) -> CategoryOut:
    current = await _get_or_404(db, category_id)

    values = payload.model_dump(exclude_unset=True, exclude={"version"})
    changes: list[str] = []

    if "name" in values:
        values["name"] = values["name"].strip()
        if values["name"] != current.name:
            if await _name_taken(db, values["name"], exclude_id=category_id):
                raise AppException(
                    409,
                    "Category name already exists",
                    ErrorCode.CATEGORY_NAME_EXISTS,
                )
            changes.append(f"name: '{current.name}' → '{values['name']}'")

    for field in ("icon", "color", "is_active"):
        if field in values and values[field] != getattr(current, field):
            changes.append(f"{field}: '{getattr(current, field)}' → '{values[field]}'")

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    old_name = current.name

    stmt = (
        update(Category)
        .where(
            Category.id == category_id,
            Category.version == payload.version,
        )
        .values(**values, version=Category.version + 1)
        .returning(Category)
    )

    category = (await db.execute(stmt)).scalar_one_or_none()
    if not category:
        raise AppException.version_conflict("Category", ErrorCode.CATEGORY_VERSION_CONFLICT)

    await emit_user_activity(
        db,
        user,
        ActivityCode.UPDATE_CATEGORY,
        target_name=old_name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(category)
    return CategoryOut.model_validate(category)


# =========================
# DELETE
# =========================
async def delete_category(db: AsyncSession, category_id: int, user: User) -> None:
    category = await _get_or_404(db, category_id)

    in_use = await db.scalar(
        select(func.count(Expense.id)).where(Expense.category_id == category_id)
    )
    if in_use:
        raise AppException(
            400,
            "Category is used by existing expenses",
            ErrorCode.CATEGORY_IN_USE,
            details={"expense_count": in_use},
        )

    name = category.name
    await db.execute(delete(Category).where(Category.id == category_id))

    await emit_user_activity(
        db,
        user,
        ActivityCode.DELETE_CATEGORY,
        target_name=name,
    )

    await db.commit()
    logger.info("Category deleted", extra={"category_id": category_id})

