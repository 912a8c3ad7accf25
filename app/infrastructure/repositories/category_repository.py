"""
SQLAlchemy Implementation of Category Repository.
"""

from app.domain.models.category import Category
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class CategoryRepository(SQLAlchemyRepository):
    model = Category
    SORTABLE_FIELDS = ("id", "title", "created_at", "updated_at", "deleted_at")
    SEARCHABLE_FIELDS = ("title",)
