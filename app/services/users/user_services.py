from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_

from app.models.users.user_models import User
from app.schemas.users.user_schemas import (
    UserCreateSchema,
    UserUpdateSchema,
    UserListFilters,
    UserDetailSchema,
    UserListResponseSchema,
)
from app.core.security import hash_password
from app.utils.activity_helpers import emit_user_activity
from app.utils.response import page_meta
from app.constants.activity_codes import ActivityCode
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)

SORT_FIELDS = {
    "created_at": User.created_at,
    "email": User.email,
    "name": User.name,
}


# =========================
# CREATE USER
# =========================
async def create_user(db: AsyncSession, payload: UserCreateSchema, admin: User) -> UserDetailSchema:
    exists = await db.scalar(select(User.id).where(User.email == payload.email))
    if exists:
        raise AppException(400, "User already exists", ErrorCode.USER_EMAIL_EXISTS)

    user = User(
        email=payload.email,
        name=payload.name,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )

    db.add(user)
    await db.flush()

    await emit_user_activity(
        db,
        admin,
        ActivityCode.CREATE_USER,
        target_email=user.email,
        target_role=user.role,
    )

    await db.commit()
    await db.refresh(user)

    logger.info("User created", extra={"user_id": user.id})
    return UserDetailSchema.model_validate(user)


# =========================
# LIST USERS
# =========================
async def list_users(
    db: AsyncSession,
    filters: UserListFilters,
) -> UserListResponseSchema:
    sort_col = SORT_FIELDS.get(filters.sort_by)
    if sort_col is None:
        raise AppException(400, "Invalid sort field", ErrorCode.VALIDATION_ERROR)

    base_stmt = select(User)

    # --------------------
    # Filters
    # --------------------
    if filters.search:
        pattern = f"%{filters.search}%"
        base_stmt = base_stmt.where(
            or_(User.email.ilike(pattern), User.name.ilike(pattern))
        )

    if filters.role:
        base_stmt = base_stmt.where(User.role == filters.role)

    if filters.is_active is not None:
        base_stmt = base_stmt.where(User.is_active == filters.is_active)

    total = await db.scalar(
        select(func.count()).select_from(base_stmt.subquery())
    ) or 0

    sort_col = (
        sort_col.desc()
        if filters.sort_order.lower() == "desc"
        else sort_col.asc()
    )

    stmt = (
        base_stmt
        .order_by(sort_col, User.id)
        .limit(filters.page_size)
        .offset((filters.page - 1) * filters.page_size)
    )

    result = await db.execute(stmt)
    users = result.scalars().all()

    return UserListResponseSchema(
        **page_meta(total, filters.page, filters.page_size),
        items=[UserDetailSchema.model_validate(u) for u in users],
    )


# =========================
# GET USER BY ID
# =========================
async def get_user_by_id(db: AsyncSession, user_id: int) -> UserDetailSchema:
    user = await db.get(User, user_id)
    if not user:
        raise AppException.not_found("User", ErrorCode.USER_NOT_FOUND)
    return UserDetailSchema.model_validate(user)


# =========================
# UPDATE USER
# =========================
async def update_user(
    db: AsyncSession,
    user_id: int,
    payload: UserUpdateSchema,
    admin: User,
) -> UserDetailSchema:
    user = await db.get(User, user_id)
    if not user:
        raise AppException.not_found("User", ErrorCode.USER_NOT_FOUND)

    values: dict = {}
    changes: list[str] = []

    if payload.email and payload.email != user.email:
        exists = await db.scalar(
            select(User.id).where(
                User.email == payload.email,
                User.id != user_id,
            )
        )
        if exists:
            raise AppException(400, "Email already in use", ErrorCode.USER_EMAIL_EXISTS)
        values["email"] = payload.email
        changes.append(f"email: '{user.email}' → '{payload.email}'")

    if payload.name and payload.name != user.name:
        values["name"] = payload.name
        changes.append(f"name: '{user.name}' → '{payload.name}'")

    if payload.password:
        values["password_hash"] = hash_password(payload.password)
        # force re-login everywhere after a password reset
        values["token_version"] = User.token_version + 1
        changes.append("password reset")

    if payload.role and payload.role != user.role:
        values["role"] = payload.role
        changes.append(f"role: {user.role} → {payload.role}")

    if payload.is_active is not None and payload.is_active != user.is_active:
        if not payload.is_active and user.id == admin.id:
            raise AppException(
                400,
                "You cannot deactivate your own account",
                ErrorCode.USER_SELF_DEACTIVATION,
            )
        values["is_active"] = payload.is_active
        changes.append("activated" if payload.is_active else "deactivated")

    if not values:
        raise AppException(400, "No changes provided", ErrorCode.VALIDATION_ERROR)

    # -------------------------------------------------
    # OPTIMISTIC UPDATE
    # -------------------------------------------------
    stmt = (
        update(User)
        .where(
            User.id == user_id,
            User.version == payload.version,
        )
        .values(
            **values,
            version=User.version + 1,
        )
        .returning(User)
    )

    result = await db.execute(stmt)
    updated_user = result.scalar_one_or_none()

    if not updated_user:
        raise AppException.version_conflict("User", ErrorCode.USER_VERSION_CONFLICT)

    await emit_user_activity(
        db,
        admin,
        ActivityCode.UPDATE_USER,
        target_email=updated_user.email,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(updated_user)
    return UserDetailSchema.model_validate(updated_user)


# =========================
# DEACTIVATE / REACTIVATE
# =========================
async def _set_user_active(
    db: AsyncSession,
    user_id: int,
    version: int,
    admin: User,
    active: bool,
) -> UserDetailSchema:
    logger.info(
        "Changing user active flag",
        extra={
            "target_user_id": user_id,
            "requested_version": version,
            "active": active,
            "actor_id": admin.id,
        },
    )

    if not active and user_id == admin.id:
        raise AppException(
            400,
            "You cannot deactivate your own account",
            ErrorCode.USER_SELF_DEACTIVATION,
        )

    stmt = (
        update(User)
        .where(
            User.id == user_id,
            User.version == version,
            User.is_active.is_(not active),
        )
        .values(is_active=active, version=User.version + 1)
        .returning(User)
    )

    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        logger.warning(
            "User state unchanged or version conflict",
            extra={"target_user_id": user_id},
        )
        raise AppException(
            409,
            "User already active" if active else "User already inactive",
            ErrorCode.CONFLICT,
        )

    await emit_user_activity(
        db,
        admin,
        ActivityCode.REACTIVATE_USER if active else ActivityCode.DEACTIVATE_USER,
        target_email=user.email,
    )

    await db.commit()
    await db.refresh(user)

    logger.info(
        "User active flag changed",
        extra={"target_user_id": user.id, "new_version": user.version},
    )
    return UserDetailSchema.model_validate(user)


async def deactivate_user(db: AsyncSession, user_id: int, version: int, admin: User):
    return await _set_user_active(db, user_id, version, admin, active=False)


async def reactivate_user(db: AsyncSession, user_id: int, version: int, admin: User):
    return await _set_user_active(db, user_id, version, admin, active=True)
