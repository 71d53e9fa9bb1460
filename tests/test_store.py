import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from restaurant.core.exceptions import StorageFailure
from restaurant.models import OrderRecord
from restaurant.orders import new_order
from restaurant.services.storage import SqlOrderStore

pytestmark = pytest.mark.asyncio


class TestAddAndGet:
    async def test_add_assigns_id(self, store, catalog):
        order = await store.add_order(new_order(1, catalog.lookup(2)))
        assert order.id is not None

    async def test_get_returns_stored_order(self, store, catalog):
        meal = catalog.lookup(3)
        saved = await store.add_order(new_order(7, meal))

        fetched = await store.get_order(saved.id)
        assert fetched == saved
        assert fetched.table_id == 7
        assert fetched.meal_id == 3
        assert fetched.ready_at - fetched.added_at == meal.cooking_time
        assert fetched.added_at.tzinfo is not None

    async def test_offset_timestamps_read_back_as_same_instant(self, store, catalog):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        saved = await store.add_order(new_order(1, catalog.lookup(2), now=now))

        fetched = await store.get_order(saved.id)
        assert fetched == saved
        assert fetched.added_at == now
        assert fetched.added_at.utcoffset() == timedelta(0)
        assert fetched.ready_at == now + timedelta(minutes=3)

    async def test_ids_increase(self, store, catalog):
        ids = [
            (await store.add_order(new_order(1, catalog.lookup(0)))).id
            for _ in range(5)
        ]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    async def test_unknown_id_returns_none(self, store, catalog):
        await store.add_order(new_order(1, catalog.lookup(0)))
        assert await store.get_order(12345) is None
        assert await store.get_order(0) is None

    async def test_order_with_id_is_rejected(self, store, catalog):
        with pytest.raises(ValueError):
            await store.add_order(new_order(1, catalog.lookup(0)).with_id(5))


class TestDelete:
    async def test_delete_hides_order(self, store, catalog):
        saved = await store.add_order(new_order(1, catalog.lookup(3)))

        assert await store.delete_order(saved.id) is True
        assert await store.get_order(saved.id) is None
        assert await store.get_orders_for_table(1) == []

    async def test_second_delete_returns_false(self, store, catalog):
        saved = await store.add_order(new_order(1, catalog.lookup(3)))

        assert await store.delete_order(saved.id) is True
        assert await store.delete_order(saved.id) is False
        assert await store.get_order(saved.id) is None

    async def test_delete_unknown_id_returns_false(self, store):
        assert await store.delete_order(999) is False

    async def test_delete_is_soft(self, store, catalog):
        saved = await store.add_order(new_order(1, catalog.lookup(3)))
        await store.delete_order(saved.id)

        async with store.engine.connect() as conn:
            result = await conn.execute(
                select(OrderRecord.deleted_at).where(OrderRecord.id == saved.id)
            )
            assert result.scalar_one() is not None

    async def test_ids_not_reused_after_delete(self, store, catalog):
        first = await store.add_order(new_order(1, catalog.lookup(0)))
        await store.delete_order(first.id)

        second = await store.add_order(new_order(1, catalog.lookup(0)))
        assert second.id > first.id


class TestTableQueries:
    async def test_orders_in_insertion_order(self, store, catalog):
        for meal_id in (1, 1, 2):
            await store.add_order(new_order(1, catalog.lookup(meal_id)))

        orders = await store.get_orders_for_table(1)
        assert [o.meal_id for o in orders] == [1, 1, 2]
        assert [o.id for o in orders] == sorted(o.id for o in orders)

    async def test_only_requested_table(self, store, catalog):
        await store.add_order(new_order(1, catalog.lookup(1)))
        await store.add_order(new_order(2, catalog.lookup(2)))
        await store.add_order(new_order(1, catalog.lookup(4)))

        orders = await store.get_orders_for_table(1)
        assert {o.table_id for o in orders} == {1}
        assert [o.meal_id for o in orders] == [1, 4]
        assert await store.get_orders_for_table(3) == []

    async def test_deleted_orders_excluded(self, store, catalog):
        first = await store.add_order(new_order(1, catalog.lookup(1)))
        second = await store.add_order(new_order(1, catalog.lookup(2)))
        third = await store.add_order(new_order(1, catalog.lookup(3)))

        await store.delete_order(second.id)

        orders = await store.get_orders_for_table(1)
        assert [o.id for o in orders] == [first.id, third.id]

    async def test_meal_orders_for_table(self, store, catalog):
        await store.add_order(new_order(1, catalog.lookup(1)))
        await store.add_order(new_order(1, catalog.lookup(2)))
        await store.add_order(new_order(1, catalog.lookup(1)))
        await store.add_order(new_order(2, catalog.lookup(1)))

        orders = await store.get_meal_orders_for_table(1, 1)
        assert len(orders) == 2
        assert all(o.table_id == 1 and o.meal_id == 1 for o in orders)
        assert orders[0].id < orders[1].id

        await store.delete_order(orders[0].id)
        remaining = await store.get_meal_orders_for_table(1, 1)
        assert [o.id for o in remaining] == [orders[1].id]


class TestConcurrency:
    async def test_concurrent_adds_get_distinct_ids(self, file_store, catalog):
        meal = catalog.lookup(4)
        orders = await asyncio.gather(*[
            file_store.add_order(new_order(table_id % 5, meal))
            for table_id in range(25)
        ])

        ids = [o.id for o in orders]
        assert len(set(ids)) == 25

        total = 0
        for table_id in range(5):
            total += len(await file_store.get_orders_for_table(table_id))
        assert total == 25

    async def test_concurrent_deletes_succeed_once(self, file_store, catalog):
        saved = await file_store.add_order(new_order(1, catalog.lookup(0)))

        results = await asyncio.gather(*[
            file_store.delete_order(saved.id) for _ in range(5)
        ])
        assert results.count(True) == 1


class TestFailures:
    async def test_uninitialized_schema_raises_storage_failure(self, catalog):
        store = SqlOrderStore.from_url("sqlite+aiosqlite:///:memory:")
        try:
            with pytest.raises(StorageFailure) as exc_info:
                await store.add_order(new_order(1, catalog.lookup(0)))

            assert exc_info.value.operation == "add_order"
            assert exc_info.value.detail
            assert exc_info.value.__cause__ is not None

            with pytest.raises(StorageFailure):
                await store.get_orders_for_table(1)
        finally:
            await store.close()

    async def test_unreachable_database(self, tmp_path, catalog):
        store = SqlOrderStore.from_url(
            f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'orders.db'}"
        )
        try:
            with pytest.raises(StorageFailure):
                await store.get_order(1)
            assert await store.health_check() is False
        finally:
            await store.close()

    async def test_health_check(self, store):
        assert await store.health_check() is True

    async def test_initialize_is_idempotent(self, store, catalog):
        saved = await store.add_order(new_order(1, catalog.lookup(0)))
        await store.initialize()
        assert await store.get_order(saved.id) == saved
