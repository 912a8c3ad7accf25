"""Product service — business logic for the product catalogue."""

from typing import Optional, Type

from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError

from app.application.services.base_service import SoftDeleteService
from app.core.exceptions import BadRequestError, ResourceNotFoundError, ResourceNotModifiedError, storage_errors
from app.domain.mappers import Payload, to_product_dto, to_product_row
from app.domain.schemas.product import ProductRead
from app.domain.slugs import is_valid_slug, slugify
from app.infrastructure.database import ConnectionPool
from app.infrastructure.repositories.category_repository import CategoryRepository
from app.infrastructure.repositories.product_repository import ProductRepository


def is_slug_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the products.slug unique key."""
    return "slug" in str(exc.orig).lower()


def slug_taken(slug: str) -> BadRequestError:
    return BadRequestError(f"The slug {slug} is already in use")


class ProductService(SoftDeleteService):
    resource_name = "product"
    resource_plural = "products"

    def __init__(
        self,
        pool: ConnectionPool,
        *,
        product_repository: Type[ProductRepository] = ProductRepository,
        category_repository: Type[CategoryRepository] = CategoryRepository,
        logger=None,
    ):
        super().__init__(pool, product_repository, logger)
        self.category_repository = category_repository

    def to_dto(self, row) -> ProductRead:
        return to_product_dto(row)

    async def find_by_id(self, id: int) -> ProductRead:
        """Get a product with its attribute values and images."""
        with storage_errors("Error while retrieving product", self.logger):
            async with self.pool.connection() as conn:
                products = self.repository(conn)
                row = await products.find_by_id(id)
                if row is None:
                    raise ResourceNotFoundError(self.resource_name)
                attributes = await products.find_attributes(id)
                images = await products.find_images(id)
        return to_product_dto(row, attributes, images)

    async def store(self, payload: Payload) -> ProductRead:
        fields = to_product_row(payload)
        fields["slug"] = self._checked_slug(fields.get("slug") or slugify(fields.get("title", "")))

        with storage_errors("Error while storing product", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                products = self.repository(conn)
                await self._check_category(conn, fields.get("category_id"))
                await self._check_slug_free(products, fields["slug"])
                try:
                    product_id = await products.store(fields)
                except IntegrityError as exc:
                    if is_slug_conflict(exc):
                        raise slug_taken(fields["slug"]) from exc
                    raise
                row = await products.find_by_id(product_id)

        self.logger.info("Product created", product_id=product_id, slug=fields["slug"])
        return self.to_dto(row)

    async def update(self, id: int, payload: Payload) -> ProductRead:
        fields = to_product_row(payload)
        if "slug" in fields:
            fields["slug"] = self._checked_slug(fields["slug"])

        with storage_errors("Error while updating product", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                products = self.repository(conn)
                product = await products.find_by_id(id)
                if product is None:
                    raise ResourceNotFoundError(self.resource_name)
                if product["deleted_at"] is not None:
                    raise BadRequestError("The product is deleted")
                await self._check_category(conn, fields.get("category_id"))
                if "slug" in fields:
                    await self._check_slug_free(products, fields["slug"], exclude_id=id)
                try:
                    affected = await products.update(fields, id) if fields else 1
                except IntegrityError as exc:
                    if "slug" in fields and is_slug_conflict(exc):
                        raise slug_taken(fields["slug"]) from exc
                    raise
                if affected != 1:
                    raise ResourceNotModifiedError("The product was not updated")
                row = await products.find_by_id(id)
                attributes = await products.find_attributes(id)
                images = await products.find_images(id)

        self.logger.info("Product updated", product_id=id)
        return to_product_dto(row, attributes, images)

    @staticmethod
    def _checked_slug(slug: str) -> str:
        if not is_valid_slug(slug):
            raise BadRequestError(
                "The slug format is invalid",
                errors=[{"field": "slug", "message": "Use lowercase letters, digits and single dashes"}],
            )
        return slug

    async def _check_category(self, conn, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        category = await self.category_repository(conn).find_by_id(category_id)
        if category is None or category["deleted_at"] is not None:
            raise BadRequestError(
                "The category does not exist",
                errors=[{"field": "category_id", "message": f"No active category with id {category_id}"}],
            )

    @staticmethod
    async def _check_slug_free(products: ProductRepository, slug: str, exclude_id: Optional[int] = None) -> None:
        owner: Optional[RowMapping] = await products.find_by_slug(slug)
        if owner is not None and owner["id"] != exclude_id:
            raise slug_taken(slug)
