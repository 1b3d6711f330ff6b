"""
Message board business logic.

Scope:
- offset pagination (page + total count)
- cursor pagination (rows after the last seen id + total count)
- create with name-uniqueness conflict detection
- delete by name
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from core import db
from core.errors import DuplicateName, IntegrityFault, InvalidPriority, MissingParameters, NotFound, StoreFault
from core.validation import Rule, enforce, is_string_provided, to_number

from . import pagination, repository

MIN_PRIORITY = 1
MAX_PRIORITY = 3

logger = logging.getLogger(__name__)


def _valid_priority(body: Mapping[str, Any]) -> bool:
    number = to_number(body.get("priority"))
    return number is not None and number.is_integer() and MIN_PRIORITY <= number <= MAX_PRIORITY


CREATE_RULES = (
    Rule(
        lambda body: is_string_provided(body.get("name")) and is_string_provided(body.get("message")),
        MissingParameters,
        "Missing required information - please refer to documentation",
    ),
    Rule(_valid_priority, InvalidPriority),
)


async def _page_and_count(fetch_page, *, snapshot: bool) -> tuple[list[dict], int]:
    """
    Run a page query and the total count.

    With `snapshot` both run in one read-only transaction; otherwise they run
    concurrently and the count may be from a slightly different moment.
    """
    try:
        if snapshot:
            async with db.snapshot() as conn:
                rows = await fetch_page(conn)
                total = await repository.count_messages(conn=conn)
            return rows, total
        rows, total = await asyncio.gather(fetch_page(None), repository.count_messages(), return_exceptions=True)
        for outcome in (rows, total):
            if isinstance(outcome, BaseException):
                raise outcome
        return rows, total
    except db.StoreError as exc:
        logger.exception("pagination_query_failed")
        raise StoreFault() from exc


async def offset_page(raw_limit: Any = None, raw_offset: Any = None, *, snapshot: bool = False) -> dict:
    limit = pagination.resolve_limit(raw_limit)
    offset = pagination.resolve_offset(raw_offset)

    rows, total = await _page_and_count(
        lambda conn: repository.list_offset(limit, offset, conn=conn),
        snapshot=snapshot,
    )
    return {
        "entries": [pagination.format_entry(row) for row in rows],
        "pagination": pagination.offset_metadata(total=total, limit=limit, offset=offset),
    }


async def cursor_page(raw_limit: Any = None, raw_cursor: Any = None, *, snapshot: bool = False) -> dict:
    limit = pagination.resolve_limit(raw_limit)
    cursor = pagination.resolve_cursor(raw_cursor)

    rows, total = await _page_and_count(
        lambda conn: repository.list_after(cursor, limit, conn=conn),
        snapshot=snapshot,
    )
    return {
        # format_entry only keeps public fields, which drops demo_id.
        "entries": [pagination.format_entry(row) for row in rows],
        "pagination": pagination.cursor_metadata(
            total=total,
            limit=limit,
            cursor=pagination.next_cursor((int(row["demo_id"]) for row in rows), cursor),
        ),
    }


async def create_message(payload: Mapping[str, Any]) -> dict:
    enforce(payload, CREATE_RULES)
    name = str(payload["name"])
    message = str(payload["message"])
    priority = int(to_number(payload["priority"]))

    try:
        row = await repository.insert_message(name=name, message=message, priority=priority)
    except db.ConstraintViolation as exc:
        logger.info("create_rejected reason=name_exists constraint=%s", exc.constraint)
        raise DuplicateName() from exc
    except db.StoreError as exc:
        logger.exception("create_failed")
        raise StoreFault() from exc

    return pagination.format_entry(row)


async def delete_message(name: str) -> str:
    try:
        rows = await repository.delete_by_name(name)
    except db.StoreError as exc:
        logger.exception("delete_failed")
        raise StoreFault() from exc

    if not rows:
        raise NotFound()
    if len(rows) > 1:
        logger.error("delete_integrity_fault rows=%s", len(rows))
        raise IntegrityFault()

    return "Deleted: " + pagination.format_entry(rows[0])["formatted"]
