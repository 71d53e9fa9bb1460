"""
SQL Order Store Implementation

Order store backed by a relational database through SQLAlchemy's asyncio
extension. Each operation runs as one short transaction on a pooled
connection; the database's own concurrency control serializes id
assignment, so no application-level locking is needed.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy import select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from restaurant.core.exceptions import StorageFailure
from restaurant.database import build_engine, build_session_maker, init_db
from restaurant.models import OrderRecord
from restaurant.orders import Order, utc_now
from restaurant.services.storage.base import BaseOrderStore

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # Naive values are UTC; SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_order(record: OrderRecord) -> Order:
    return Order(
        id=record.id,
        table_id=record.table_id,
        meal_id=record.meal_id,
        added_at=_as_utc(record.added_at),
        ready_at=_as_utc(record.ready_at),
    )


class SqlOrderStore(BaseOrderStore):
    """
    Relational implementation of the order store.

    Attributes:
        engine: Async engine owning the connection pool

    Example:
        >>> store = SqlOrderStore.from_url("sqlite+aiosqlite:///:memory:")
        >>> await store.initialize()
        >>> order = await store.add_order(new_order(1, meal))
        >>> await store.delete_order(order.id)
        True
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_maker = build_session_maker(engine)

        logger.info(f"SqlOrderStore initialized (backend={self.provider_name})")

    @classmethod
    def from_url(
        cls,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> "SqlOrderStore":
        """Build a store with its own engine for the given URL."""
        engine = build_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
        )
        return cls(engine)

    @property
    def provider_name(self) -> str:
        """Return the database dialect name."""
        return self.engine.dialect.name

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Run the body in a single transaction.

        Commits on success, rolls back on any error, and translates
        database errors into StorageFailure.
        """
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    yield session
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Order store {operation} failed: {e}")
            raise StorageFailure(operation, str(e)) from e

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def initialize(self) -> None:
        try:
            await init_db(self.engine)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Order store initialization failed: {e}")
            raise StorageFailure("initialize", str(e)) from e

    async def close(self) -> None:
        await self.engine.dispose()
        logger.debug("Order store connections released")

    # =========================================================================
    # WRITES
    # =========================================================================

    async def add_order(self, order: Order) -> Order:
        if order.id is not None:
            raise ValueError(f"Order already has id {order.id}")

        order = replace(
            order,
            added_at=_as_utc(order.added_at),
            ready_at=_as_utc(order.ready_at),
        )
        record = OrderRecord(
            table_id=order.table_id,
            meal_id=order.meal_id,
            added_at=order.added_at,
            ready_at=order.ready_at,
        )

        async with self._transaction("add_order") as session:
            session.add(record)

        logger.debug(f"Stored order #{record.id} (table {order.table_id}, meal {order.meal_id})")
        return order.with_id(record.id)

    async def delete_order(self, order_id: int) -> bool:
        stmt = (
            update(OrderRecord)
            .where(OrderRecord.id == order_id, OrderRecord.deleted_at.is_(None))
            .values(deleted_at=utc_now())
            .execution_options(synchronize_session=False)
        )

        async with self._transaction("delete_order") as session:
            result = await session.execute(stmt)

        deleted = result.rowcount == 1
        logger.debug(f"Delete order #{order_id}: {'deleted' if deleted else 'no live order'}")
        return deleted

    # =========================================================================
    # READS
    # =========================================================================

    async def get_order(self, order_id: int) -> Optional[Order]:
        stmt = select(OrderRecord).where(
            OrderRecord.id == order_id,
            OrderRecord.deleted_at.is_(None),
        )

        async with self._transaction("get_order") as session:
            result = await session.execute(stmt)
            record = result.scalar_one_or_none()

        return _to_order(record) if record is not None else None

    async def get_orders_for_table(self, table_id: int) -> list[Order]:
        stmt = (
            select(OrderRecord)
            .where(OrderRecord.table_id == table_id, OrderRecord.deleted_at.is_(None))
            .order_by(OrderRecord.id)
        )
        return await self._fetch_all("get_orders_for_table", stmt)

    async def get_meal_orders_for_table(self, table_id: int, meal_id: int) -> list[Order]:
        stmt = (
            select(OrderRecord)
            .where(
                OrderRecord.table_id == table_id,
                OrderRecord.meal_id == meal_id,
                OrderRecord.deleted_at.is_(None),
            )
            .order_by(OrderRecord.id)
        )
        return await self._fetch_all("get_meal_orders_for_table", stmt)

    async def _fetch_all(self, operation: str, stmt) -> list[Order]:
        async with self._transaction(operation) as session:
            result = await session.execute(stmt)
            records = result.scalars().all()

        return [_to_order(record) for record in records]

    # =========================================================================
    # HEALTH
    # =========================================================================

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Order store health check failed: {e}")
            return False
