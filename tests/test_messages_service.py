"""Unit tests for messages.service against an in-memory message store."""

import unittest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

from core import db
from core.errors import DuplicateName, IntegrityFault, InvalidPriority, MissingParameters, NotFound, StoreFault
from fakes import FakeMessageStore
from messages import service


class _StoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = FakeMessageStore()
        patcher = self.store.patch()
        patcher.start()
        self.addCleanup(patcher.stop)


class TestOffsetPage(_StoreTestCase):
    async def test_entries_are_rank_window(self) -> None:
        self.store.seed(25)
        for limit, offset in ((10, 0), (10, 10), (7, 3), (10, 20), (5, 40)):
            with self.subTest(limit=limit, offset=offset):
                result = await service.offset_page(str(limit), str(offset))
                expected = [f"user{i}" for i in range(25)][offset : offset + limit]
                self.assertEqual([e["name"] for e in result["entries"]], expected)
                self.assertEqual(result["pagination"]["nextPage"], limit + offset)
                self.assertEqual(result["pagination"]["totalRecords"], 25)

    async def test_defaults(self) -> None:
        self.store.seed(12)
        result = await service.offset_page(None, "bogus")
        self.assertEqual(len(result["entries"]), 10)
        self.assertEqual(
            result["pagination"],
            {"totalRecords": 12, "limit": 10, "offset": 0, "nextPage": 10},
        )

    async def test_entries_are_formatted(self) -> None:
        self.store.seed(1)
        result = await service.offset_page()
        self.assertEqual(result["entries"][0]["formatted"], "{1} - [user0] says: message 0")


class TestCursorPage(_StoreTestCase):
    async def test_walks_all_rows_in_order(self) -> None:
        self.store.seed(23)
        seen: list[str] = []
        cursor = "0"
        while True:
            result = await service.cursor_page("5", cursor)
            if not result["entries"]:
                self.assertEqual(result["pagination"]["cursor"], int(cursor))
                break
            seen.extend(e["name"] for e in result["entries"])
            cursor = str(result["pagination"]["cursor"])
        self.assertEqual(seen, [f"user{i}" for i in range(23)])

    async def test_entries_after_cursor_and_max_id(self) -> None:
        self.store.seed(10)
        await self.store.delete_by_name("user4")
        result = await service.cursor_page("3", "3")
        ids = [r["demo_id"] for r in self.store.rows if r["name"] in {e["name"] for e in result["entries"]}]
        self.assertTrue(all(i > 3 for i in ids))
        self.assertEqual(ids, sorted(ids))
        self.assertEqual(result["pagination"]["cursor"], max(ids))
        self.assertEqual(result["pagination"]["totalRecords"], 9)

    async def test_internal_id_stripped(self) -> None:
        self.store.seed(2)
        result = await service.cursor_page()
        for entry in result["entries"]:
            self.assertEqual(set(entry), {"name", "message", "priority", "formatted"})

    async def test_empty_page_returns_input_cursor(self) -> None:
        result = await service.cursor_page("10", "99")
        self.assertEqual(result["entries"], [])
        self.assertEqual(result["pagination"], {"totalRecords": 0, "limit": 10, "cursor": 99})

    async def test_invalid_cursor_starts_from_beginning(self) -> None:
        self.store.seed(3)
        result = await service.cursor_page("x", "-4")
        self.assertEqual(len(result["entries"]), 3)
        self.assertEqual(result["pagination"]["limit"], 10)
        self.assertEqual(result["pagination"]["cursor"], 3)


class TestSnapshotMode(_StoreTestCase):
    """With snapshot enabled, page and count share one connection."""

    async def test_page_and_count_share_connection(self) -> None:
        self.store.seed(4)
        conn = object()

        @asynccontextmanager
        async def fake_snapshot():
            yield conn

        with patch.object(service.db, "snapshot", fake_snapshot):
            result = await service.offset_page("2", "0", snapshot=True)

        self.assertEqual(len(result["entries"]), 2)
        self.assertEqual(self.store.page_calls, [conn])
        self.assertEqual(self.store.count_calls, [conn])

    async def test_default_mode_uses_pool(self) -> None:
        await service.cursor_page()
        self.assertEqual(self.store.page_calls, [None])
        self.assertEqual(self.store.count_calls, [None])


class TestPaginationStoreFailure(_StoreTestCase):
    async def test_count_failure_is_store_fault(self) -> None:
        with patch.object(service.repository, "count_messages", AsyncMock(side_effect=db.StoreError("boom"))):
            with self.assertRaises(StoreFault):
                await service.offset_page()

    async def test_both_queries_failing_is_store_fault(self) -> None:
        failing = AsyncMock(side_effect=db.StoreError("down"))
        with patch.object(service.repository, "list_after", failing), patch.object(
            service.repository, "count_messages", failing
        ):
            with self.assertRaises(StoreFault):
                await service.cursor_page()
        self.assertEqual(failing.await_count, 2)


class TestCreateMessage(_StoreTestCase):
    async def test_create_returns_formatted_entry(self) -> None:
        entry = await service.create_message({"name": "A", "message": "hi", "priority": 2})
        self.assertEqual(entry, {"name": "A", "message": "hi", "priority": 2, "formatted": "{2} - [A] says: hi"})

    async def test_numeric_string_priority(self) -> None:
        entry = await service.create_message({"name": "B", "message": "yo", "priority": "3"})
        self.assertEqual(entry["priority"], 3)

    async def test_integral_float_priority(self) -> None:
        entry = await service.create_message({"name": "C", "message": "ok", "priority": 2.0})
        self.assertEqual(entry["priority"], 2)

    async def test_missing_parameters_checked_before_priority(self) -> None:
        with self.assertRaises(MissingParameters) as ctx:
            await service.create_message({"name": "", "message": "hi", "priority": 9})
        self.assertEqual(ctx.exception.message, "Missing required information - please refer to documentation")
        self.assertEqual(self.store.rows, [])

    async def test_invalid_priority(self) -> None:
        for priority in (None, 0, 4, "high", "", 3.5, 1.5, "2.5"):
            with self.subTest(priority=priority):
                with self.assertRaises(InvalidPriority):
                    await service.create_message({"name": "A", "message": "hi", "priority": priority})
        self.assertEqual(self.store.rows, [])

    async def test_duplicate_name(self) -> None:
        await service.create_message({"name": "X", "message": "first", "priority": 1})
        with self.assertRaises(DuplicateName) as ctx:
            await service.create_message({"name": "X", "message": "second", "priority": 1})
        self.assertEqual(ctx.exception.message, "Name exists")
        self.assertEqual(len(self.store.rows), 1)

    async def test_other_store_error(self) -> None:
        with patch.object(service.repository, "insert_message", AsyncMock(side_effect=db.StoreError("down"))):
            with self.assertRaises(StoreFault):
                await service.create_message({"name": "A", "message": "hi", "priority": 1})

    async def test_create_then_cursor_round_trip(self) -> None:
        await service.create_message({"name": "A", "message": "hi", "priority": 2})
        result = await service.cursor_page(None, "0")
        self.assertIn(
            {"name": "A", "message": "hi", "priority": 2, "formatted": "{2} - [A] says: hi"},
            result["entries"],
        )


class TestDeleteMessage(_StoreTestCase):
    async def test_delete_existing(self) -> None:
        await service.create_message({"name": "A", "message": "hi", "priority": 2})
        self.assertEqual(await service.delete_message("A"), "Deleted: {2} - [A] says: hi")
        self.assertEqual(self.store.rows, [])

    async def test_delete_missing_is_always_not_found(self) -> None:
        for _ in range(3):
            with self.assertRaises(NotFound) as ctx:
                await service.delete_message("nobody")
            self.assertEqual(ctx.exception.status_code, 404)

    async def test_delete_twice(self) -> None:
        await service.create_message({"name": "A", "message": "hi", "priority": 2})
        await service.delete_message("A")
        with self.assertRaises(NotFound):
            await service.delete_message("A")

    async def test_multiple_rows_is_integrity_fault(self) -> None:
        rows = [{"name": "A", "message": "hi", "priority": 1}, {"name": "A", "message": "yo", "priority": 2}]
        with patch.object(service.repository, "delete_by_name", AsyncMock(return_value=rows)):
            with self.assertRaises(IntegrityFault):
                await service.delete_message("A")

    async def test_store_error(self) -> None:
        with patch.object(service.repository, "delete_by_name", AsyncMock(side_effect=db.StoreError("down"))):
            with self.assertRaises(StoreFault):
                await service.delete_message("A")
