from sqlalchemy.ext.asyncio import AsyncSession
from app.models.audit.activity_models import ActivityLog
from app.models.users.user_models import User
from app.constants.activity_templates import ACTIVITY_TEMPLATES
from app.constants.activity_codes import ActivityCode


def render_activity(code: ActivityCode, **context) -> str:
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        return template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )


async def emit_user_activity(db: AsyncSession, user: User, code: ActivityCode, **context):
    """
    Stage an activity row in the caller's transaction; it is written
    with the change it describes or not at all.
    """
    db.add(
        ActivityLog(
            user_id=user.id,
            actor_email=user.email,
            code=code.value,
            message=render_activity(
                code,
                actor_name=user.name,
                actor_email=user.email,
                **context,
            ),
        )
    )
