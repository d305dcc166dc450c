import math
from typing import Callable, Iterable, Optional


def page_meta(total: int, page: int, limit: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'currentPage': page,
        'totalPages': total_pages,
        'totalCount': total,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }


def paginate(qs, *, page: int = 1, limit: int = 10, total: Optional[int] = None,
             formatter: Optional[Callable] = None) -> tuple[list, dict]:
    """Slice ``qs`` to one page and return ``(items, pagination)``.

    ``qs`` is expected to be ordered already.  ``total`` overrides the
    count for callers whose candidate set is derived rather than stored.
    """
    if total is None:
        total = qs.count()
    start = (page - 1) * limit
    if start >= total:
        # past the last page; never hand the database an oversized OFFSET
        return [], page_meta(total, page, limit)
    rows: Iterable = qs[start:start + limit]
    items = [formatter(r) for r in rows] if formatter else list(rows)
    return items, page_meta(total, page, limit)
