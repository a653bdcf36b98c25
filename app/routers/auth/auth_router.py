from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.config import (
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_EXPIRE_MINUTES,
)
from app.schemas.auth.auth_schemas import (
    LoginRequest,
    RegisterRequest,
    SessionOut,
    SessionUser,
)
from app.services.auth.auth_service import (
    register_user,
    login_user,
    logout_user,
)
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=APIResponse[SessionOut],
)
async def register(
    payload: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Register attempt", extra={"email": payload.email})

    session = await register_user(db, payload)
    _set_session_cookie(response, session.access_token)

    return success_response("Account created successfully", session)


@router.post("/login", response_model=APIResponse[SessionOut])
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"email": payload.email})

    session = await login_user(db, payload.email, payload.password)
    _set_session_cookie(response, session.access_token)

    return success_response("Login successful", session)


@router.post("/logout", response_model=APIResponse)
async def logout(
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    logger.info(
        "Logout request",
        extra={"user_id": current_user.id, "email": current_user.email},
    )

    await logout_user(db, current_user)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")

    return success_response("Logged out successfully")


@router.get("/me", response_model=APIResponse[SessionUser])
async def me(current_user=Depends(get_current_user)):
    return success_response(
        "Current user",
        SessionUser(
            id=current_user.id,
            email=current_user.email,
            name=current_user.name,
            role=current_user.role,
        ),
    )
