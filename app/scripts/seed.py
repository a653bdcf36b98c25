"""
Bootstrap data: the admin account and the predefined expense categories.

    python -m app.scripts.seed
"""
import asyncio
import os

from sqlalchemy import select, func

from app.core.db import session_scope
from app.constants.roles import ADMIN_ROLE
from app.core.security import hash_password
from app.core.logging import setup_logging
from app.models.users.user_models import User
from app.models.masters.category_models import Category
from app.utils.logger import get_logger

logger = get_logger(__name__)

# (name, icon, color)
DEFAULT_CATEGORIES = [
    ("Aluguel de carro", "car", "#3b82f6"),
    ("Avião", "plane", "#6366f1"),
    ("Combustível", "fuel", "#f97316"),
    ("Diversos", "package", "#6b7280"),
    ("Estacionamento", "parking", "#8b5cf6"),
    ("Hotel", "bed", "#ec4899"),
    ("Internet", "wifi", "#06b6d4"),
    ("Pagamento adiantado", "wallet", "#14b8a6"),
    ("Pedágio", "milestone", "#eab308"),
    ("Quilometragem", "gauge", "#22c55e"),
    ("Restaurante", "utensils", "#ef4444"),
    ("Táxi", "car-taxi", "#facc15"),
    ("Telefone", "phone", "#0ea5e9"),
    ("Transporte público", "bus", "#10b981"),
    ("Trem", "train", "#a855f7"),
]


async def seed_admin(session) -> bool:
    email = os.getenv("ADMIN_EMAIL", "admin@rdv.com")
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        raise ValueError("ADMIN_PASSWORD must be set to seed the admin user")

    exists = await session.scalar(select(User.id).where(User.email == email))
    if exists:
        logger.info("Admin already present", extra={"email": email})
        return False

    session.add(
        User(
            email=email,
            name=os.getenv("ADMIN_NAME", "Administrador"),
            password_hash=hash_password(password),
            role=ADMIN_ROLE,
            is_active=True,
        )
    )
    logger.info("Admin user created", extra={"email": email})
    return True


async def seed_categories(session) -> int:
    count = await session.scalar(select(func.count(Category.id)))
    if count:
        logger.info("Categories already seeded", extra={"count": count})
        return 0

    session.add_all(
        Category(name=name, icon=icon, color=color)
        for name, icon, color in DEFAULT_CATEGORIES
    )
    logger.info("Categories created", extra={"count": len(DEFAULT_CATEGORIES)})
    return len(DEFAULT_CATEGORIES)


async def seed():
    async with session_scope() as session:
        await seed_admin(session)
        await seed_categories(session)


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
