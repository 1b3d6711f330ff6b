"""
Message board persistence (raw SQL).

Table `demo`: demo_id serial primary key, name unique, message, priority.
`demo_id` is only selected where a query needs it as a cursor.
"""

from __future__ import annotations

import asyncpg

from core import db


async def list_offset(limit: int, offset: int, *, conn: asyncpg.Connection | None = None) -> list[dict]:
    # OFFSET scans every skipped row; cost grows linearly with the offset.
    return await db.fetch_all(
        """
        SELECT name, message, priority
        FROM demo
        ORDER BY demo_id
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
        conn=conn,
    )


async def list_after(cursor: int, limit: int, *, conn: asyncpg.Connection | None = None) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT demo_id, name, message, priority
        FROM demo
        WHERE demo_id > $1
        ORDER BY demo_id
        LIMIT $2
        """,
        cursor,
        limit,
        conn=conn,
    )


async def count_messages(*, conn: asyncpg.Connection | None = None) -> int:
    # Full count(*) is O(n) on large tables.
    value = await db.fetch_val("SELECT count(*) FROM demo", conn=conn)
    return int(value or 0)


async def insert_message(*, name: str, message: str, priority: int) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO demo (name, message, priority)
        VALUES ($1, $2, $3)
        RETURNING name, message, priority
        """,
        name,
        message,
        priority,
    )
    if row is None:
        raise db.StoreError("Insert returned no row.")
    return row


async def delete_by_name(name: str) -> list[dict]:
    return await db.fetch_all(
        """
        DELETE FROM demo
        WHERE name = $1
        RETURNING name, message, priority
        """,
        name,
    )
