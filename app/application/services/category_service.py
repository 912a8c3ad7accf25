"""Category service — business logic for product categories."""

from typing import Type

from app.application.services.base_service import SoftDeleteService
from app.core.exceptions import BadRequestError, ResourceNotFoundError, ResourceNotModifiedError, storage_errors
from app.domain.mappers import Payload, to_category_dto, to_category_row
from app.domain.schemas.category import CategoryRead
from app.infrastructure.database import ConnectionPool
from app.infrastructure.repositories.category_repository import CategoryRepository


class CategoryService(SoftDeleteService):
    resource_name = "category"
    resource_plural = "categories"

    def __init__(
        self,
        pool: ConnectionPool,
        *,
        category_repository: Type[CategoryRepository] = CategoryRepository,
        logger=None,
    ):
        super().__init__(pool, category_repository, logger)

    def to_dto(self, row) -> CategoryRead:
        return to_category_dto(row)

    async def store(self, payload: Payload) -> CategoryRead:
        fields = to_category_row(payload)
        with storage_errors("Error while storing category", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                categories = self.repository(conn)
                category_id = await categories.store(fields)
                row = await categories.find_by_id(category_id)
        self.logger.info("Category created", category_id=category_id)
        return self.to_dto(row)

    async def update(self, id: int, payload: Payload) -> CategoryRead:
        fields = to_category_row(payload)
        with storage_errors("Error while updating category", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                categories = self.repository(conn)
                category = await categories.find_by_id(id)
                if category is None:
                    raise ResourceNotFoundError(self.resource_name)
                if category["deleted_at"] is not None:
                    raise BadRequestError("The category is deleted")
                if fields and await categories.update(fields, id) != 1:
                    raise ResourceNotModifiedError("The category was not updated")
                row = await categories.find_by_id(id)
        self.logger.info("Category updated", category_id=id)
        return self.to_dto(row)
