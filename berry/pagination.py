"""
Offset/limit pagination for transaction listings.

Pages are 1-indexed. Out-of-range input is saturated rather than
rejected: page 0 and page 1 are the same page, and a page size
above MAX_PER_PAGE is capped.
"""

from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


@dataclass(frozen=True)
class PaginationParameters:
    limit: int
    offset: int

    @classmethod
    def from_page(
        cls, page: int | None = None, per_page: int | None = None
    ) -> "PaginationParameters":
        if page is None:
            page = DEFAULT_PAGE
        if per_page is None:
            per_page = DEFAULT_PER_PAGE

        limit = max(min(per_page, MAX_PER_PAGE), 0)
        offset = max(page - 1, 0) * limit
        return cls(limit=limit, offset=offset)


def pagination_from_query(
    page: int | None, per_page: int | None
) -> PaginationParameters | None:
    """
    Build pagination parameters from optional query values.

    Returns None when neither value was given, which means the
    caller asked for every transaction.
    """
    if page is None and per_page is None:
        return None
    return PaginationParameters.from_page(page, per_page)
