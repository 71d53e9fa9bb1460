"""
Meal Catalog

Static reference data mapping meal identifiers to a display name and the
expected cooking duration. The catalog is built once at startup and handed
to the request layer; it is never mutated afterwards, so concurrent
handlers read it without locking.

Usage:
    from restaurant.catalog import build_default_catalog

    catalog = build_default_catalog()
    meal = catalog.lookup(2)
    if meal is not None:
        print(meal.name, meal.cooking_time)
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional


@dataclass(frozen=True)
class MealInfo:
    """
    A single catalog entry.

    Attributes:
        id: Meal identifier used in request paths
        name: Display name
        cooking_time: Expected time from order to ready
    """
    id: int
    name: str
    cooking_time: timedelta


class MealCatalog:
    """
    Read-only collection of meals indexed by id.

    Example:
        >>> catalog = MealCatalog([MealInfo(7, "Soup", timedelta(minutes=2))])
        >>> catalog.lookup(7).name
        'Soup'
        >>> catalog.lookup(8) is None
        True
    """

    def __init__(self, meals: Iterable[MealInfo]):
        self._meals = tuple(meals)
        self._by_id: dict[int, MealInfo] = {}

        for meal in self._meals:
            if meal.id in self._by_id:
                raise ValueError(f"Duplicate meal id in catalog: {meal.id}")
            if meal.cooking_time <= timedelta(0):
                raise ValueError(f"Meal {meal.id} must have a positive cooking time")
            self._by_id[meal.id] = meal

    def lookup(self, meal_id: int) -> Optional[MealInfo]:
        """Return the meal with the given id, or None when it is unknown."""
        return self._by_id.get(meal_id)

    def list_all(self) -> tuple[MealInfo, ...]:
        """Return every meal in catalog order."""
        return self._meals

    def __contains__(self, meal_id: object) -> bool:
        return meal_id in self._by_id

    def __len__(self) -> int:
        return len(self._meals)

    def __repr__(self) -> str:
        return f"<MealCatalog {len(self._meals)} meals>"


# Default menu served by the restaurant
DEFAULT_MEALS = (
    (0, "Green Tea", 1),
    (1, "Americano Coffee", 2),
    (2, "Omelette", 3),
    (3, "Fried Egg", 4),
    (4, "Club Sandwich", 5),
    (5, "Fried Rice", 6),
)


def build_default_catalog() -> MealCatalog:
    """
    Build the restaurant's standard menu.

    Returns:
        MealCatalog: Catalog with cooking times in whole minutes
    """
    return MealCatalog(
        MealInfo(id=meal_id, name=name, cooking_time=timedelta(minutes=minutes))
        for meal_id, name, minutes in DEFAULT_MEALS
    )
