"""
SQLAlchemy Implementation of Admin Repository.

An admin row is always read composed with its backing user; the admin's
active/deleted state is the user's ``deleted_at``.
"""

from typing import Dict

from sqlalchemy import ColumnElement, Select, func, select, update

from app.domain.models.admin import Admin
from app.domain.models.user import User, UserRole
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

admins = Admin.__table__
users = User.__table__
user_roles = UserRole.__table__


class AdminRepository(SQLAlchemyRepository):
    """Admin repository composing admins, users and roles."""

    model = Admin
    SORTABLE_FIELDS = ("id", "first_name", "last_name", "email", "is_super", "created_at", "updated_at")
    SEARCHABLE_FIELDS = ("first_name", "last_name")

    @property
    def deleted_at(self) -> ColumnElement:
        return users.c.deleted_at

    def _select(self) -> Select:
        return select(
            admins.c.id,
            admins.c.user_id,
            users.c.first_name,
            users.c.last_name,
            users.c.email,
            admins.c.is_super,
            user_roles.c.type.label("user_role"),
            admins.c.created_at,
            admins.c.updated_at,
            users.c.deleted_at,
        ).select_from(
            admins.join(users, admins.c.user_id == users.c.id).outerjoin(
                user_roles, users.c.user_role_id == user_roles.c.id
            )
        )

    def _sort_columns(self) -> Dict[str, ColumnElement]:
        columns = {name: users.c[name] for name in ("first_name", "last_name", "email")}
        columns.update({name: admins.c[name] for name in ("id", "is_super", "created_at", "updated_at")})
        return columns

    def _search_columns(self):
        return [users.c[name] for name in self.SEARCHABLE_FIELDS]

    def _flip_user_deleted_at(self, id: int, value):
        user_id = select(admins.c.user_id).where(admins.c.id == id).scalar_subquery()
        return update(users).where(users.c.id == user_id).values(deleted_at=value)

    async def delete(self, id: int) -> int:
        result = await self.connection.execute(self._flip_user_deleted_at(id, func.now()))
        return result.rowcount

    async def restore(self, id: int) -> int:
        result = await self.connection.execute(self._flip_user_deleted_at(id, None))
        return result.rowcount
