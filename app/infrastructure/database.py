"""
Database engine, declarative base and the connection pool used by services.

Services never hold more than one connection per operation. They borrow it
through ``ConnectionPool.connection()``, which owns the begin/commit/rollback
and release lifecycle so no call site can forget it.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from sqlalchemy import insert, select
from sqlalchemy.exc import TimeoutError as SQLAlchemyPoolTimeout
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import Settings, get_settings
from app.core.exceptions import PoolExhaustedError

logger = structlog.get_logger(__name__)

Base = declarative_base()

USER_ROLES = ("admin", "customer")


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    url = settings.DATABASE_URL
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    # SQLite engines pick their own pool class, which may not take sizing args
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return create_async_engine(url, **options)


class ConnectionPool:
    """Hands out one connection per unit of work."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ConnectionPool":
        return cls(create_engine_from_settings(settings or get_settings()))

    async def acquire(self) -> AsyncConnection:
        """Borrow a connection, waiting at most the pool timeout."""
        try:
            return await self.engine.connect()
        except SQLAlchemyPoolTimeout as exc:
            logger.error("Connection pool exhausted", error=str(exc))
            raise PoolExhaustedError() from exc

    @asynccontextmanager
    async def connection(self, transactional: bool = False) -> AsyncIterator[AsyncConnection]:
        """Borrow a connection for the duration of the block.

        With ``transactional=True`` the block runs inside BEGIN and is
        committed on success or rolled back on any exception. Otherwise
        autobegun work is committed on success. The connection is released
        exactly once on every path.
        """
        conn = await self.acquire()
        try:
            if transactional:
                trans = await conn.begin()
                try:
                    yield conn
                except BaseException:
                    await _rollback_quietly(trans)
                    raise
                await trans.commit()
            else:
                yield conn
                if conn.in_transaction():
                    await conn.commit()
        finally:
            await conn.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


async def _rollback_quietly(trans) -> None:
    # The caller re-raises the original error; a failed rollback must not mask it
    try:
        await trans.rollback()
    except Exception:
        logger.exception("Transaction rollback failed")


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables and seed the user role lookup table."""
    # Import all models so SQLAlchemy knows about them
    from app.domain.models.admin import Admin  # noqa: F401
    from app.domain.models.category import Category  # noqa: F401
    from app.domain.models.product import Product  # noqa: F401
    from app.domain.models.user import UserRole

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        existing = set((await conn.execute(select(UserRole.type))).scalars().all())
        missing = [{"type": role} for role in USER_ROLES if role not in existing]
        if missing:
            await conn.execute(insert(UserRole.__table__), missing)
            logger.info("User roles seeded", roles=[row["type"] for row in missing])


_pool: Optional[ConnectionPool] = None


def get_pool() -> ConnectionPool:
    """FastAPI dependency returning the process-wide connection pool."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_settings()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.dispose()
        _pool = None
        logger.info("Database connection pool closed")
