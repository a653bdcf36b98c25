from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users.user_models import User
from app.schemas.auth.auth_schemas import RegisterRequest, SessionOut, SessionUser
from app.core.security import verify_password, hash_password, create_session_token
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.constants.roles import USER_ROLE
from app.utils.activity_helpers import emit_user_activity
from app.utils.logger import get_logger

logger = get_logger("auth.service")


def _session_for(user: User) -> SessionOut:
    token = create_session_token(
        user_id=user.id,
        email=user.email,
        name=user.name,
        token_version=user.token_version,
    )
    return SessionOut(
        access_token=token,
        user=SessionUser(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
        ),
    )


# =====================================================
# REGISTER
# =====================================================
async def register_user(db: AsyncSession, payload: RegisterRequest) -> SessionOut:
    logger.info("Registering user", extra={"email": payload.email})

    exists = await db.scalar(select(User.id).where(User.email == payload.email))
    if exists:
        raise AppException(400, "Email already in use", ErrorCode.USER_EMAIL_EXISTS)

    user = User(
        email=payload.email,
        name=payload.name,
        password_hash=hash_password(payload.password),
        role=USER_ROLE,
        token_version=0,
        last_login=datetime.now(timezone.utc),
    )
    db.add(user)
    await db.flush()

    await emit_user_activity(db, user, ActivityCode.REGISTER)

    session = _session_for(user)
    await db.commit()

    logger.info("User registered", extra={"user_id": user.id})
    return session


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str) -> SessionOut:
    logger.info("Authenticating user", extra={"email": email})

    user = await db.scalar(select(User).where(User.email == email))

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise AppException(401, "Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise AppException(403, "User account is inactive", ErrorCode.USER_INACTIVE)

    user.last_login = datetime.now(timezone.utc)

    await emit_user_activity(db, user, ActivityCode.LOGIN)

    session = _session_for(user)
    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id})
    return session


# =====================================================
# LOGOUT
# =====================================================
async def logout_user(db: AsyncSession, user: User) -> None:
    logger.info("Logging out user", extra={"user_id": user.id})

    # every token issued so far carries the old version
    user.token_version += 1

    await emit_user_activity(db, user, ActivityCode.LOGOUT)

    await db.commit()

    logger.info("Logout successful", extra={"user_id": user.id})
