"""Base service — listing, lookup and soft delete/restore shared by every aggregate.

Each method borrows exactly one connection from the pool for its whole
duration and translates raw storage failures into domain errors.
"""

from typing import Any, ClassVar, Dict, Mapping, Optional, Type

import structlog

from app.core.exceptions import ResourceNotFoundError, ResourceNotModifiedError, storage_errors
from app.domain.repositories.base import SoftDeleteRepository
from app.domain.schemas.query import normalize_page, pagination, parse_sort, validate_search, validate_status
from app.infrastructure.database import ConnectionPool


class SoftDeleteService:
    """Service over one soft-deletable aggregate root."""

    resource_name: ClassVar[str] = "resource"
    resource_plural: ClassVar[str] = "resources"

    def __init__(self, pool: ConnectionPool, repository: Type[SoftDeleteRepository], logger=None):
        self.pool = pool
        self.repository = repository
        self.logger = logger or structlog.get_logger(self.__class__.__module__)

    def to_dto(self, row: Mapping[str, Any]) -> Any:
        raise NotImplementedError

    async def find_all(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Return one page of resources plus pagination metadata."""
        # Validate every query token before a connection is borrowed
        page, size = normalize_page(page, size)
        sort_by = parse_sort(sort, self.repository.SORTABLE_FIELDS)
        status = validate_status(status)
        search = validate_search(search)

        with storage_errors(f"Error while retrieving {self.resource_plural}", self.logger):
            async with self.pool.connection() as conn:
                repo = self.repository(conn)
                total = await repo.count(status, search)
                rows = await repo.find_all(page, size, sort_by, status, search)

        return {
            "items": [self.to_dto(row) for row in rows],
            "pagination": pagination(page, size, rows, total),
        }

    async def find_by_id(self, id: int) -> Any:
        with storage_errors(f"Error while retrieving {self.resource_name}", self.logger):
            async with self.pool.connection() as conn:
                row = await self.repository(conn).find_by_id(id)
        if row is None:
            raise ResourceNotFoundError(self.resource_name)
        return self.to_dto(row)

    async def delete(self, id: int) -> int:
        with storage_errors(f"Error while deleting {self.resource_name}", self.logger):
            async with self.pool.connection() as conn:
                repo = self.repository(conn)
                if await repo.find_by_id(id) is None:
                    raise ResourceNotFoundError(self.resource_name)
                if await repo.delete(id) != 1:
                    raise ResourceNotModifiedError(f"The {self.resource_name} was not deleted")
        self.logger.info(f"{self.resource_name.capitalize()} deleted", id=id)
        return id

    async def restore(self, id: int) -> int:
        with storage_errors(f"Error while restoring {self.resource_name}", self.logger):
            async with self.pool.connection() as conn:
                repo = self.repository(conn)
                # an active row is not restorable, so it counts as not found
                if await repo.find_trashed_by_id(id) is None:
                    raise ResourceNotFoundError(self.resource_name)
                if await repo.restore(id) != 1:
                    raise ResourceNotModifiedError(f"The {self.resource_name} was not restored")
        self.logger.info(f"{self.resource_name.capitalize()} restored", id=id)
        return id
