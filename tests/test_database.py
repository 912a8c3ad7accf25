"""
Tests for the connection pool and its scoped acquisition helper.
"""
from __future__ import annotations

import pytest
from sqlalchemy import insert, select

from app.core.exceptions import PoolExhaustedError
from app.domain.models.category import Category
from app.domain.models.user import UserRole
from app.infrastructure.database import ConnectionPool, init_db

from conftest import checked_out, count_rows, make_engine


async def test_init_db_seeds_roles_once(pool):
    await init_db(pool.engine)

    async with pool.connection() as conn:
        roles = (await conn.execute(select(UserRole.__table__.c.type))).scalars().all()

    assert sorted(roles) == ["admin", "customer"]


async def test_transactional_scope_commits_on_success(pool):
    async with pool.connection(transactional=True) as conn:
        await conn.execute(insert(Category.__table__).values(title="Shoes"))

    assert await count_rows(pool, Category) == 1
    assert checked_out(pool) == 0


async def test_transactional_scope_rolls_back_and_releases_on_error(pool):
    with pytest.raises(ValueError):
        async with pool.connection(transactional=True) as conn:
            await conn.execute(insert(Category.__table__).values(title="Shoes"))
            raise ValueError("boom")

    assert await count_rows(pool, Category) == 0
    assert checked_out(pool) == 0


async def test_plain_scope_commits_autobegun_writes(pool):
    async with pool.connection() as conn:
        await conn.execute(insert(Category.__table__).values(title="Hats"))

    assert await count_rows(pool, Category) == 1
    assert checked_out(pool) == 0


async def test_pool_exhaustion_raises_without_releasing(tmp_path):
    engine = make_engine(tmp_path / "small.db", pool_size=1, pool_timeout=0.1)
    pool = ConnectionPool(engine)
    try:
        held = await pool.acquire()
        with pytest.raises(PoolExhaustedError):
            async with pool.connection():
                pass  # pragma: no cover
        assert checked_out(pool) == 1

        await held.close()
        assert checked_out(pool) == 0
    finally:
        await pool.dispose()


class FakeTransaction:
    def __init__(self, fail_commit=False, fail_rollback=False):
        self.fail_commit = fail_commit
        self.fail_rollback = fail_rollback
        self.rolled_back = False

    async def commit(self):
        if self.fail_commit:
            raise RuntimeError("commit failed")

    async def rollback(self):
        self.rolled_back = True
        if self.fail_rollback:
            raise RuntimeError("rollback failed")


class FakeConnection:
    def __init__(self, trans):
        self.trans = trans
        self.close_calls = 0

    async def begin(self):
        return self.trans

    def in_transaction(self):
        return False

    async def close(self):
        self.close_calls += 1


class FakePool(ConnectionPool):
    def __init__(self, conn):
        super().__init__(engine=None)
        self.conn = conn

    async def acquire(self):
        return self.conn


async def test_connection_released_when_commit_fails():
    conn = FakeConnection(FakeTransaction(fail_commit=True))

    with pytest.raises(RuntimeError, match="commit failed"):
        async with FakePool(conn).connection(transactional=True):
            pass

    assert conn.close_calls == 1


async def test_failed_rollback_keeps_original_error_and_releases():
    trans = FakeTransaction(fail_rollback=True)
    conn = FakeConnection(trans)

    with pytest.raises(ValueError, match="original"):
        async with FakePool(conn).connection(transactional=True):
            raise ValueError("original")

    assert trans.rolled_back
    assert conn.close_calls == 1
