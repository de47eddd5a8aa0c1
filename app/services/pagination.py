"""Page metadata derived from a total count."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_previous_page: bool


def build_pagination(page: int, limit: int, total_count: int) -> Pagination:
    """Compute page metadata; out-of-range pages stay valid, they just hold no items."""
    total_pages = max(1, math.ceil(total_count / limit))
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def empty_pagination(page: int) -> Pagination:
    """Metadata for a short-circuited search with no candidates."""
    return build_pagination(page=page, limit=1, total_count=0)
