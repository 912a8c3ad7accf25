"""Domain helpers for product slug generation and validation."""

import re
import unicodedata
from typing import Optional

SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")
MAX_SLUG_LENGTH = 200


def slugify(value: str) -> str:
    """Lowercase ASCII words joined by single dashes."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")[:MAX_SLUG_LENGTH].rstrip("-")


def is_valid_slug(value: Optional[str]) -> bool:
    if not value:
        return False
    return len(value) <= MAX_SLUG_LENGTH and bool(SLUG_PATTERN.fullmatch(value))
