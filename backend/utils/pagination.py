# utils/pagination.py
from typing import Optional

from pydantic import BaseModel

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps the row offset within a 64-bit integer for every store
MAX_PAGE = 10_000_000


def normalize_page(page: Optional[int]) -> int:
    if page is None or page < 1:
        return DEFAULT_PAGE
    return min(page, MAX_PAGE)


def normalize_limit(limit: Optional[int]) -> int:
    if limit is None or limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


class PaginationInfo(BaseModel):
    """
    Page metadata for list responses.

    ``next_page`` and ``previous_page`` are plain arithmetic and can point past
    the last page or at page 0; ``has_next``/``has_previous`` say whether they
    are usable.
    """

    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next: bool
    has_previous: bool
    next_page: int
    previous_page: int

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "PaginationInfo":
        total_pages = (total_count + limit - 1) // limit
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_count=total_count,
            limit=limit,
            has_next=page < total_pages,
            has_previous=page > 1,
            next_page=page + 1,
            previous_page=page - 1,
        )
