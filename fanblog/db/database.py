"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from fanblog.configs import settings
from fanblog.models import TABLES, CategoryDB
from fanblog.monitoring import get_logger

logger = get_logger(__name__)

STATEMENT_TIMEOUT_MS = 30000

DEFAULT_CATEGORY_TITLE = "Uncategorized"
DEFAULT_CATEGORY_SLUG = "uncategorized"

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_timeout=settings.POOL_TIMEOUT,
    pool_recycle=settings.POOL_RECYCLE,
    pool_pre_ping=True,
    connect_args={
        "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
        "server_settings": {"statement_timeout": str(STATEMENT_TIMEOUT_MS)},
    },
)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    FastAPI dependency yielding a session that commits when the request succeeds.

    Yields:
        AsyncSession: Database session
    """
    async with transaction() as session:
        yield session


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """Session that commits on exit and rolls back on any exception."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Transaction error")
            raise


async def init_db() -> None:
    """
    Create missing tables and the default category.

    Alembic owns the schema in production; this keeps development setups
    usable without running migrations.
    """
    async with engine.begin() as conn:
        tables = [model.__table__ for model in TABLES]  # type: ignore[attr-defined]
        await conn.run_sync(SQLModel.metadata.create_all, tables=tables)

    async with transaction() as session:
        found = await session.execute(select(CategoryDB.id).limit(1))
        if found.scalar_one_or_none() is None:
            session.add(CategoryDB(title=DEFAULT_CATEGORY_TITLE, slug=DEFAULT_CATEGORY_SLUG))
            logger.info("Default category created", title=DEFAULT_CATEGORY_TITLE)

    logger.info("Database initialized")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
