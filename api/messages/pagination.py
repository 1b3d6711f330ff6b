"""
Pagination rules shared by the offset and cursor endpoints.

Query parameters arrive as raw strings. Anything missing, non-numeric or out
of range falls back to the default instead of failing the request.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from core.validation import to_number

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
# Serial ids start at 1, so 0 sorts before every row.
DEFAULT_CURSOR = 0
# Postgres bigint bound; larger LIMIT/OFFSET/id values are rejected by the driver.
MAX_BIGINT = 2**63 - 1


def _bounded_int(raw: Any, *, minimum: int) -> int | None:
    number = to_number(raw)
    if number is None or number > MAX_BIGINT:
        return None
    value = int(number)
    return value if value >= minimum else None


def resolve_limit(raw: Any) -> int:
    value = _bounded_int(raw, minimum=1)
    return DEFAULT_LIMIT if value is None else value


def resolve_offset(raw: Any) -> int:
    value = _bounded_int(raw, minimum=0)
    return DEFAULT_OFFSET if value is None else value


def resolve_cursor(raw: Any) -> int:
    value = _bounded_int(raw, minimum=0)
    return DEFAULT_CURSOR if value is None else value


def format_entry(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": row["name"],
        "message": row["message"],
        "priority": row["priority"],
        "formatted": f"{{{row['priority']}}} - [{row['name']}] says: {row['message']}",
    }


def next_cursor(ids: Iterable[int], current: int) -> int:
    """
    Largest id among the returned rows, or `current` when the page is empty.
    """
    return max(ids, default=current)


def offset_metadata(*, total: int, limit: int, offset: int) -> dict[str, int]:
    # nextPage is not clamped to total; a page past the end is simply empty.
    return {
        "totalRecords": total,
        "limit": limit,
        "offset": offset,
        "nextPage": limit + offset,
    }


def cursor_metadata(*, total: int, limit: int, cursor: int) -> dict[str, int]:
    return {
        "totalRecords": total,
        "limit": limit,
        "cursor": cursor,
    }
