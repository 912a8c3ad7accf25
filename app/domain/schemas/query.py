"""Listing query helpers — sort, search, status and pagination parameters.

Every token that ends up in a query is checked here first, so repositories
only ever see allow-listed field names and a sanitized search term.
"""

import math
import re
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from app.config import get_settings
from app.core.exceptions import BadRequestError

SEARCH_PATTERN = re.compile(r"(?:[^\W_]|[\s.'-])+")
STATUSES = ("active", "deleted")
# largest offset a signed 64-bit SQL integer can hold
MAX_OFFSET = 2**63 - 1

Sort = Tuple[str, bool]


def parse_sort(sort: Optional[str], allowed: Iterable[str]) -> Sort:
    """Turn ``"field"`` / ``"-field"`` into ``(field, descending)``."""
    if not sort:
        return "id", False
    sort = sort.strip()
    descending = sort.startswith("-")
    field = sort[1:] if descending else sort
    allowed = set(allowed)
    if field not in allowed:
        raise BadRequestError(
            f"The sort field '{field}' is not allowed",
            errors=[{"field": "sort", "message": f"Allowed values: {', '.join(sorted(allowed))}"}],
        )
    return field, descending


def validate_search(search: Optional[str]) -> Optional[str]:
    if search is None:
        return None
    term = search.strip()
    if not term:
        return None
    if len(term) > 100 or not SEARCH_PATTERN.fullmatch(term):
        raise BadRequestError(
            "The search contains invalid characters",
            errors=[{"field": "search", "message": "Only letters, digits, spaces, '.', \"'\" and '-' are allowed"}],
        )
    return term


def validate_status(status: Optional[str]) -> Optional[str]:
    if status is None or status == "":
        return None
    if status not in STATUSES:
        raise BadRequestError(
            f"The status '{status}' is not valid",
            errors=[{"field": "status", "message": f"Allowed values: {', '.join(STATUSES)}"}],
        )
    return status


def normalize_page(page: Optional[int], size: Optional[int]) -> Tuple[int, int]:
    settings = get_settings()
    page = 1 if page is None else page
    size = settings.DEFAULT_PAGE_SIZE if size is None else size
    if page < 1:
        raise BadRequestError("The page must be greater than or equal to 1")
    if size < 1 or size > settings.MAX_PAGE_SIZE:
        raise BadRequestError(f"The size must be between 1 and {settings.MAX_PAGE_SIZE}")
    if (page - 1) * size > MAX_OFFSET:
        raise BadRequestError("The page is out of range")
    return page, size


def pagination(page: int, size: int, rows: Sequence[Any], total: int) -> Dict[str, int]:
    """Pagination metadata; ``size`` is the number of rows actually returned."""
    return {
        "page": page,
        "size": len(rows),
        "total_elements": total,
        "total_pages": math.ceil(total / size),
    }
