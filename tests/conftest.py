"""
Shared fixtures: a connection pool over a temporary SQLite database per test.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
import pytest_asyncio
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

# Make the app package importable when running the tests locally
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.services.admin_service import AdminService  # noqa: E402
from app.application.services.category_service import CategoryService  # noqa: E402
from app.application.services.product_service import ProductService  # noqa: E402
from app.application.services.user_service import UserService  # noqa: E402
from app.infrastructure.database import ConnectionPool, init_db  # noqa: E402


def make_engine(db_file: Path, pool_size: int = 2, pool_timeout: float = 5):
    return create_async_engine(
        f"sqlite+aiosqlite:///{db_file}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
    )


@pytest_asyncio.fixture()
async def pool(tmp_path):
    """Connection pool on a fresh schema with seeded roles."""
    engine = make_engine(tmp_path / "test.db")
    await init_db(engine)
    pool = ConnectionPool(engine)

    yield pool

    await pool.dispose()


@pytest.fixture()
def context():
    # cheap bcrypt rounds keep the suite fast
    return CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)


@pytest.fixture()
def admin_service(pool, context):
    return AdminService(pool, context=context)


@pytest.fixture()
def user_service(pool, context):
    return UserService(pool, context=context)


@pytest.fixture()
def category_service(pool):
    return CategoryService(pool)


@pytest.fixture()
def product_service(pool):
    return ProductService(pool)


def checked_out(pool: ConnectionPool) -> int:
    """Number of connections currently borrowed from the pool."""
    return pool.engine.pool.checkedout()


async def count_rows(pool: ConnectionPool, model) -> int:
    async with pool.connection() as conn:
        result = await conn.execute(select(func.count()).select_from(model.__table__))
        return result.scalar_one()


ADMIN_PAYLOAD = {
    "first_name": "Alice",
    "last_name": "Admin",
    "email": "a@x.com",
    "password": "secret12",
    "is_super": False,
}
