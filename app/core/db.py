# app/core/db.py

import ssl
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy import event

from app.core.config import (
    DATABASE_URL,
    DB_TYPE,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_SSL_VERIFY,
    DB_ECHO_POOL,
    APP_ENV,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _engine_options() -> dict:
    if DB_TYPE == "postgres":
        ssl_ctx = ssl.create_default_context()
        if not DB_SSL_VERIFY:
            ssl_ctx.check_hostname = False
            ssl_ctx.verify_mode = ssl.CERT_NONE

        return {
            "connect_args": {
                "ssl": ssl_ctx,
                # pgbouncer in transaction mode cannot hold prepared statements
                "statement_cache_size": 0,
                "prepared_statement_cache_size": 0,
            },
            "pool_size": DB_POOL_SIZE,
            "max_overflow": DB_MAX_OVERFLOW,
            "pool_timeout": DB_POOL_TIMEOUT,
            "pool_pre_ping": True,
        }

    return {"connect_args": {"check_same_thread": False}}


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    echo_pool=DB_ECHO_POOL,
    **_engine_options(),
)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


if DB_TYPE == "sqlite":
    # RESTRICT / CASCADE on expenses, mileage and receipts rely on it
    @event.listens_for(engine.sync_engine, "connect")
    def enable_sqlite_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Unit of work outside a request: commit on success, roll back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


import app.models  # noqa: E402,F401  registers every table on Base.metadata


def _require_development(action: str) -> None:
    if APP_ENV != "development":
        raise RuntimeError(f"{action} is forbidden outside development")


async def init_models():
    _require_development("init_models()")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": len(Base.metadata.tables)})


async def drop_models():
    _require_development("drop_models()")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
