import math
from typing import Any, Optional

from pydantic import BaseModel

DEFAULT_PAGE = 1
MIN_LIMIT = 1
MAX_LIMIT = 100

# Parsed values end up as signed 64-bit SQL integers
MIN_INT = -(2**63)
MAX_INT = 2**63 - 1
MAX_PAGE = MAX_INT // MAX_LIMIT


class Pagination(BaseModel):
    """Pagination block attached to every list response."""

    total: int
    page: int
    limit: int
    total_pages: int


def parse_int(value: Any) -> Optional[int]:
    """Parse a loosely-typed query value; anything malformed becomes None."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except (TypeError, ValueError):
            return None
    if not MIN_INT <= number <= MAX_INT:
        return None
    return number


def resolve_page(page: Any, limit: Any, default_limit: int = 25) -> tuple[int, int]:
    """
    Turn raw ``page``/``limit`` inputs into usable values.

    Malformed or out-of-range values fall back to the defaults, then ``page``
    is clamped to [1, MAX_PAGE] and ``limit`` to [1, 100].
    """
    page_number = parse_int(page)
    if page_number is None:
        page_number = DEFAULT_PAGE

    limit_number = parse_int(limit)
    if limit_number is None:
        limit_number = default_limit

    page_number = min(max(page_number, DEFAULT_PAGE), MAX_PAGE)
    limit_number = min(max(limit_number, MIN_LIMIT), MAX_LIMIT)
    return page_number, limit_number


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_pagination(total: int, page: int, limit: int) -> Pagination:
    return Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if limit else 0,
    )
