"""
SQLAlchemy implementation of the Base Repository.

Repositories are bound to one borrowed connection and never manage
transactions themselves; the calling service decides when to commit.
"""

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import ColumnElement, Select, and_, func, insert, or_, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.exceptions import BadRequestError
from app.domain.schemas.query import Sort


class SQLAlchemyRepository:
    """Generic soft-delete aware repository over a single table."""

    model: ClassVar[Any]
    SORTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("id",)
    SEARCHABLE_FIELDS: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, connection: AsyncConnection):
        self.connection = connection
        self.table = self.model.__table__

    # ── Statement building ────────────────────────────────

    @property
    def deleted_at(self) -> ColumnElement:
        return self.table.c.deleted_at

    def _select(self) -> Select:
        return select(self.table)

    def _sort_columns(self) -> Dict[str, ColumnElement]:
        return {name: self.table.c[name] for name in self.SORTABLE_FIELDS}

    def _search_columns(self) -> List[ColumnElement]:
        return [self.table.c[name] for name in self.SEARCHABLE_FIELDS]

    def _order_by(self, sort: Sort) -> ColumnElement:
        field, descending = sort
        column = self._sort_columns().get(field)
        if column is None:
            raise BadRequestError(f"The sort field '{field}' is not allowed")
        return column.desc() if descending else column.asc()

    def _filter(self, stmt: Select, status: Optional[str], search: Optional[str]) -> Select:
        if status == "active":
            stmt = stmt.where(self.deleted_at.is_(None))
        elif status == "deleted":
            stmt = stmt.where(self.deleted_at.is_not(None))
        if search and self.SEARCHABLE_FIELDS:
            # every word must prefix some word of a searchable column
            stmt = stmt.where(
                and_(
                    *(
                        or_(
                            *(
                                clause
                                for column in self._search_columns()
                                for clause in (column.ilike(f"{word}%"), column.ilike(f"% {word}%"))
                            )
                        )
                        for word in search.split()
                    )
                )
            )
        return stmt

    # ── Reads ─────────────────────────────────────────────

    async def count(self, status: Optional[str] = None, search: Optional[str] = None) -> int:
        filtered = self._filter(self._select(), status, search).subquery()
        result = await self.connection.execute(select(func.count()).select_from(filtered))
        return int(result.scalar_one())

    async def find_all(
        self,
        page: int = 1,
        size: int = 50,
        sort: Sort = ("id", False),
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[RowMapping]:
        stmt = (
            self._filter(self._select(), status, search)
            .order_by(self._order_by(sort))
            .offset((page - 1) * size)
            .limit(size)
        )
        result = await self.connection.execute(stmt)
        return result.mappings().all()

    async def find_by_id(self, id: int) -> Optional[RowMapping]:
        stmt = self._select().where(self.table.c.id == id)
        result = await self.connection.execute(stmt)
        return result.mappings().first()

    async def find_trashed_by_id(self, id: int) -> Optional[RowMapping]:
        """Like ``find_by_id`` but only matches soft-deleted rows."""
        stmt = self._select().where(self.table.c.id == id, self.deleted_at.is_not(None))
        result = await self.connection.execute(stmt)
        return result.mappings().first()

    # ── Writes ────────────────────────────────────────────

    async def store(self, fields: Mapping[str, Any]) -> int:
        result = await self.connection.execute(insert(self.table).values(**fields))
        return result.inserted_primary_key[0]

    async def update(self, fields: Mapping[str, Any], id: int) -> int:
        if not fields:
            return 0
        stmt = update(self.table).where(self.table.c.id == id).values(**fields)
        result = await self.connection.execute(stmt)
        return result.rowcount

    async def delete(self, id: int) -> int:
        stmt = update(self.table).where(self.table.c.id == id).values(deleted_at=func.now())
        result = await self.connection.execute(stmt)
        return result.rowcount

    async def restore(self, id: int) -> int:
        stmt = update(self.table).where(self.table.c.id == id).values(deleted_at=None)
        result = await self.connection.execute(stmt)
        return result.rowcount
