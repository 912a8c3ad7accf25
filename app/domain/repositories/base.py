"""
Base Repository Interface.
Defines the data access contract services rely on. Implementations are bound
to one borrowed connection and never begin or commit transactions.
"""

from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple


class SoftDeleteRepository(Protocol):
    """Interface for CRUD operations over a soft-deletable entity."""

    SORTABLE_FIELDS: Tuple[str, ...]

    async def count(self, status: Optional[str] = None, search: Optional[str] = None) -> int:
        """Count rows matching the same predicate as ``find_all``."""
        ...

    async def find_all(
        self,
        page: int = 1,
        size: int = 50,
        sort: Tuple[str, bool] = ("id", False),
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Mapping[str, Any]]:
        """List one page of rows."""
        ...

    async def find_by_id(self, id: int) -> Optional[Mapping[str, Any]]:
        """Get a single row by ID, whatever its deleted state."""
        ...

    async def find_trashed_by_id(self, id: int) -> Optional[Mapping[str, Any]]:
        """Get a single soft-deleted row by ID."""
        ...

    async def store(self, fields: Mapping[str, Any]) -> int:
        """Insert a row and return its generated ID."""
        ...

    async def update(self, fields: Mapping[str, Any], id: int) -> int:
        """Update a row and return the affected row count."""
        ...

    async def delete(self, id: int) -> int:
        """Soft delete a row and return the affected row count."""
        ...

    async def restore(self, id: int) -> int:
        """Clear a row's soft delete mark and return the affected row count."""
        ...
