from datetime import timedelta

import pytest

from restaurant.catalog import DEFAULT_MEALS, MealCatalog, MealInfo


class TestMealCatalog:
    def test_lookup_known_meal(self, catalog):
        meal = catalog.lookup(2)
        assert meal.id == 2
        assert meal.name == "Omelette"
        assert meal.cooking_time == timedelta(minutes=3)

    def test_lookup_unknown_meal_returns_none(self, catalog):
        assert catalog.lookup(99) is None
        assert catalog.lookup(-1) is None

    def test_list_all_keeps_catalog_order(self, catalog):
        assert [meal.id for meal in catalog.list_all()] == [m[0] for m in DEFAULT_MEALS]
        assert len(catalog) == len(DEFAULT_MEALS)

    def test_contains(self, catalog):
        assert 0 in catalog
        assert 6 not in catalog

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            MealCatalog([
                MealInfo(1, "Tea", timedelta(minutes=1)),
                MealInfo(1, "Coffee", timedelta(minutes=2)),
            ])

    def test_non_positive_cooking_time_rejected(self):
        with pytest.raises(ValueError):
            MealCatalog([MealInfo(1, "Water", timedelta(0))])

    def test_meal_is_immutable(self, catalog):
        meal = catalog.lookup(1)
        with pytest.raises(AttributeError):
            meal.cooking_time = timedelta(hours=1)
