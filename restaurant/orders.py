"""
Order Entity & Factory

An order ties one meal to one table, together with the time it was taken
and the time the kitchen is expected to have it ready. Orders are built
here without an id; the order store assigns identity when it accepts them.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from restaurant.catalog import MealInfo
from restaurant.core.exceptions import InvalidInput


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Order:
    """
    A single meal request for a table.

    Attributes:
        table_id: Table the meal was ordered for
        meal_id: Catalog id of the meal
        added_at: When the order was taken
        ready_at: When the meal is expected to be ready
        id: Store-assigned identity, None until the order is stored
    """
    table_id: int
    meal_id: int
    added_at: datetime
    ready_at: datetime
    id: Optional[int] = None

    def with_id(self, order_id: int) -> "Order":
        """Return a copy of this order carrying the given identity."""
        return replace(self, id=order_id)

    def is_ready(self, at: Optional[datetime] = None) -> bool:
        """Whether the meal is expected to be ready at the given time."""
        return (at or utc_now()) >= self.ready_at

    def same_meal(self, other: "Order") -> bool:
        """Compare by table and meal only, ignoring identity and timestamps."""
        return (self.table_id, self.meal_id) == (other.table_id, other.meal_id)

    def __repr__(self):
        return f"<Order #{self.id} - table {self.table_id} - meal {self.meal_id}>"


def new_order(
    table_id: int,
    meal: Optional[MealInfo],
    now: Optional[datetime] = None,
) -> Order:
    """
    Create an unsaved order for a table.

    Args:
        table_id: Table the meal is ordered for
        meal: Catalog entry, as returned by MealCatalog.lookup
        now: Creation time (defaults to the current UTC time)

    Returns:
        Order: New order with no id

    Raises:
        InvalidInput: If no catalog entry was given, or now has no timezone
    """
    if meal is None:
        raise InvalidInput("Cannot create an order without a valid meal")
    if now is not None and now.tzinfo is None:
        raise InvalidInput("Order creation time must be timezone-aware")

    added_at = (now or utc_now()).astimezone(timezone.utc)
    return Order(
        table_id=table_id,
        meal_id=meal.id,
        added_at=added_at,
        ready_at=added_at + meal.cooking_time,
    )
