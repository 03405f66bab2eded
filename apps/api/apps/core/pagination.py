"""
Query-string pagination helpers.

Two schemes are used by the API:

* cursor pagination (prescriptions, notifications): the cursor is the id of
  the last row of the previous page. Ids come from the auto-increment
  primary key, so id order is insertion order.
* page/offset pagination (catalog, admin listings).

Malformed ``limit``/``cursor``/``page`` values fall back to defaults.
"""
from dataclasses import dataclass, field
from typing import List, Optional

NEWEST = 'newest'
OLDEST = 'oldest'


def parse_positive_int(raw, default):
    """Parse a positive integer query param, returning ``default`` when malformed."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return value


def parse_limit(raw, default, maximum):
    return min(parse_positive_int(raw, default), maximum)


def parse_non_negative_int(raw, default=0):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


def parse_cursor(raw) -> Optional[int]:
    return parse_positive_int(raw, None)


def parse_sort(raw):
    return OLDEST if raw == OLDEST else NEWEST


@dataclass
class CursorPage:
    items: List = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[int] = None
    limit: int = 10

    def pagination(self):
        return {
            'hasMore': self.has_more,
            'nextCursor': self.next_cursor,
            'limit': self.limit,
        }


def cursor_paginate(queryset, cursor, limit, sort=NEWEST) -> CursorPage:
    """
    Slice one page out of ``queryset`` after ``cursor``.

    A cursor naming a row that no longer exists is still a valid boundary.
    """
    if sort == OLDEST:
        queryset = queryset.order_by('id')
        if cursor is not None:
            queryset = queryset.filter(id__gt=cursor)
    else:
        queryset = queryset.order_by('-id')
        if cursor is not None:
            queryset = queryset.filter(id__lt=cursor)

    rows = list(queryset[:limit + 1])
    has_more = len(rows) > limit
    if has_more:
        rows = rows[:limit]

    return CursorPage(
        items=rows,
        has_more=has_more,
        next_cursor=rows[-1].id if has_more else None,
        limit=limit,
    )


def page_info(page, limit, total):
    """Pagination block for page-numbered admin listings."""
    pages = (total + limit - 1) // limit if limit else 0
    return {'page': page, 'limit': limit, 'total': total, 'pages': pages}
