"""
Order Store Abstract Base Class

Defines the interface contract for the order store: durable ownership of
the order collection, identity assignment, soft deletion and the lookups
the request layer needs.

Visibility rules shared by every implementation:
    - A deleted order is invisible to all reads.
    - get_order cannot tell a deleted id apart from one never issued.
    - Table queries return orders in insertion order (ascending id).

Every operation may raise StorageFailure. A failed call leaves the store
exactly as it was before the call.
"""

from abc import ABC, abstractmethod
from typing import Optional

from restaurant.orders import Order


class BaseOrderStore(ABC):
    """
    Abstract base class for order stores.

    Example:
        >>> store = create_order_store(settings)
        >>> await store.initialize()
        >>> saved = await store.add_order(new_order(1, catalog.lookup(2)))
        >>> await store.get_order(saved.id)
        <Order #1 - table 1 - meal 2>
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the backing medium.

        Returns:
            str: Provider name (e.g., "sqlite", "postgresql")
        """
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release all connections held by the store."""
        pass

    @abstractmethod
    async def add_order(self, order: Order) -> Order:
        """
        Persist a new order.

        The id is assigned atomically with the insert; two concurrent
        calls never receive the same id.

        Args:
            order: Order built by new_order, without an id

        Returns:
            Order: The stored order with its id assigned
        """
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]:
        """
        Fetch a live order by id.

        Returns:
            Optional[Order]: The order, or None if it never existed or was deleted
        """
        pass

    @abstractmethod
    async def delete_order(self, order_id: int) -> bool:
        """
        Soft-delete a live order.

        Returns:
            bool: True if a live order was deleted by this call, False otherwise
        """
        pass

    @abstractmethod
    async def get_orders_for_table(self, table_id: int) -> list[Order]:
        """Return all live orders of a table in insertion order."""
        pass

    @abstractmethod
    async def get_meal_orders_for_table(self, table_id: int, meal_id: int) -> list[Order]:
        """Return the live orders of one meal at a table in insertion order."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the backing medium.

        Returns:
            bool: True if the store is operational
        """
        pass
