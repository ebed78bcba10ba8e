from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    async_sessionmaker,
    AsyncAttrs,
)
from sqlalchemy.orm import DeclarativeBase

from billing_sync.core.config import settings

DATABASE_URL = settings.DATABASE_URL


def engine_options(url: str) -> dict[str, Any]:
    """
    Build engine keyword arguments for the given database URL.

    SQLite (used for tests and local replays) runs on a static/null pool and
    rejects queue-pool sizing arguments, so those are only set for server databases.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=10,
            max_overflow=10,
            pool_pre_ping=True,  # Validate connections before use
            pool_recycle=3600,  # Recycle connections every hour
        )
    return options


async_engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    **engine_options(DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    autoflush=False,
    expire_on_commit=False,
    autobegin=True,
)


class Base(AsyncAttrs, DeclarativeBase):
    pass


async def init_db() -> None:
    """Create any missing table for the registered models."""
    import billing_sync.core.db.models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    """Close every pooled connection of the engine."""
    await async_engine.dispose()
