"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import Select, select
from sqlalchemy.engine import RowMapping

from app.domain.models.user import User, UserRole
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

users = User.__table__
user_roles = UserRole.__table__


class UserRepository(SQLAlchemyRepository):
    """User repository joined with the role lookup table."""

    model = User
    SORTABLE_FIELDS = ("id", "first_name", "last_name", "email", "created_at", "updated_at", "deleted_at")
    SEARCHABLE_FIELDS = ("first_name", "last_name")

    def _select(self) -> Select:
        return select(
            users.c.id,
            users.c.first_name,
            users.c.last_name,
            users.c.email,
            users.c.password,
            users.c.user_role_id,
            user_roles.c.type.label("user_role"),
            users.c.created_at,
            users.c.updated_at,
            users.c.deleted_at,
        ).select_from(users.outerjoin(user_roles, users.c.user_role_id == user_roles.c.id))

    async def find_by_email_with_trashed(self, email: str) -> Optional[RowMapping]:
        """Look a user up by email, soft-deleted rows included."""
        result = await self.connection.execute(self._select().where(users.c.email == email))
        return result.mappings().first()

    async def store(self, fields: Mapping[str, Any], role: str = "customer") -> int:
        role_id = select(user_roles.c.id).where(user_roles.c.type == role).scalar_subquery()
        return await super().store({**fields, "user_role_id": role_id})
