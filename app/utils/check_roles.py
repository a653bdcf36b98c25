from fastapi import Depends

from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.models.users.user_models import User
from app.utils.get_user import get_current_user
from app.constants.roles import ADMIN_ROLE
from app.utils.logger import get_logger

logger = get_logger("auth.roles")


def require_role(*roles: str):
    allowed = {r.lower() for r in roles}

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role.lower() not in allowed:
            logger.warning(
                "Role check failed",
                extra={"user_id": user.id, "role": user.role},
            )
            raise AppException(
                403,
                "Permission denied",
                ErrorCode.PERMISSION_DENIED,
                details={"required_roles": sorted(allowed)},
            )
        return user

    return role_checker


require_admin = require_role(ADMIN_ROLE)
