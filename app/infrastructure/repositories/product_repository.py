"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import Optional, Sequence

from sqlalchemy import Select, select
from sqlalchemy.engine import RowMapping

from app.domain.models.category import Category
from app.domain.models.product import Attribute, Product, ProductAttributeValue, ProductImage
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

products = Product.__table__
categories = Category.__table__
attributes = Attribute.__table__
attribute_values = ProductAttributeValue.__table__
images = ProductImage.__table__


class ProductRepository(SQLAlchemyRepository):
    """Product repository implementation using SQLAlchemy."""

    model = Product
    SORTABLE_FIELDS = ("id", "title", "slug", "featured", "active", "created_at", "updated_at", "deleted_at")
    SEARCHABLE_FIELDS = ("title", "description")

    def _select(self) -> Select:
        return select(
            products.c.id,
            products.c.title,
            products.c.slug,
            products.c.description,
            products.c.featured,
            products.c.active,
            products.c.category_id,
            categories.c.title.label("category"),
            products.c.created_at,
            products.c.updated_at,
            products.c.deleted_at,
        ).select_from(products.outerjoin(categories, products.c.category_id == categories.c.id))

    async def find_by_slug(self, slug: str) -> Optional[RowMapping]:
        """Look a product up by slug, soft-deleted rows included."""
        result = await self.connection.execute(self._select().where(products.c.slug == slug))
        return result.mappings().first()

    async def find_attributes(self, product_id: int) -> Sequence[RowMapping]:
        stmt = (
            select(attributes.c.name.label("title"), attribute_values.c.value)
            .select_from(attribute_values.join(attributes, attribute_values.c.attribute_id == attributes.c.id))
            .where(attribute_values.c.product_id == product_id)
            .order_by(attribute_values.c.id)
        )
        result = await self.connection.execute(stmt)
        return result.mappings().all()

    async def find_images(self, product_id: int) -> Sequence[RowMapping]:
        stmt = select(images.c.id, images.c.url).where(images.c.product_id == product_id).order_by(images.c.id)
        result = await self.connection.execute(stmt)
        return result.mappings().all()
