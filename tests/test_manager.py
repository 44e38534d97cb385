"""Tests for MealListManager."""

from __future__ import annotations

import logging

import pytest

from foodtracker.meals.manager import MealListManager
from foodtracker.meals.models import Meal, RatingMatch, SearchScope
from foodtracker.meals.samples import sample_meals
from foodtracker.storage.store import MealStore


def names(meals: list[Meal]) -> list[str]:
    return [meal.name for meal in meals]


class FailingStore(MealStore):
    """Store whose writes always fail."""

    def write(self, meals) -> bool:
        return False


class TestLoad:
    """Tests for loading saved or sample meals."""

    def test_absent_store_loads_samples(self, store, display) -> None:
        manager = MealListManager(store, display=display)
        loaded = manager.load()
        assert loaded == sample_meals()
        assert [m.rating for m in loaded] == [4, 5, 3]
        assert all(m.photo is None for m in loaded)
        assert display.last == ("reload",)

    def test_corrupt_store_loads_samples(self, store, store_path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text("garbage")
        manager = MealListManager(store)
        assert manager.load() == sample_meals()

    def test_undecodable_store_loads_samples(self, store, store_path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_bytes(b"\xff\xfe\x00garbage\x80")
        assert MealListManager(store).load() == sample_meals()

    def test_deeply_nested_store_loads_samples(self, store, store_path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[" * 100000 + "]" * 100000)
        assert MealListManager(store).load() == sample_meals()

    def test_load_does_not_save_samples(self, store, store_path) -> None:
        MealListManager(store).load()
        assert not store_path.exists()

    def test_saved_empty_list_stays_empty(self, store) -> None:
        store.write([])
        manager = MealListManager(store)
        assert manager.load() == []
        assert manager.row_count() == 0

    def test_save_then_load_roundtrip(self, store) -> None:
        meals = [Meal("Soup", 3, b"photo"), Meal("Soup", 3, b"photo"), Meal("Toast", 0)]
        store.write(meals)
        first = MealListManager(store)
        first.load()
        assert first.save()

        second = MealListManager(store)
        assert second.load() == meals


class TestFilteringState:
    """Tests for is_filtering and update_search."""

    def test_not_filtering_initially(self, manager) -> None:
        assert not manager.is_filtering()
        assert manager.row_count() == 3

    def test_active_without_text_is_not_filtering(self, manager) -> None:
        manager.update_search(text="", active=True)
        assert not manager.is_filtering()
        assert manager.row_count() == 3

    def test_text_without_active_is_not_filtering(self, manager) -> None:
        manager.update_search(text="pasta")
        assert not manager.is_filtering()

    def test_active_with_text_filters(self, manager, display) -> None:
        result = manager.update_search(text="pasta", active=True)
        assert manager.is_filtering()
        assert names(result) == ["Pasta with Meatballs"]
        assert manager.row_count() == 1
        assert manager.row_at(0).name == "Pasta with Meatballs"
        assert display.last == ("reload",)

    def test_scope_change_refilters(self, manager) -> None:
        manager.update_search(text="5", active=True)
        assert manager.row_count() == 0
        manager.update_search(scope="Rating")
        assert names(manager.visible_meals()) == ["Chicken and Potatoes"]

    def test_clear_search(self, manager) -> None:
        manager.update_search(text="pasta", active=True)
        manager.clear_search()
        assert not manager.is_filtering()
        assert manager.row_count() == 3

    def test_unknown_scope(self, manager) -> None:
        with pytest.raises(ValueError):
            manager.update_search(scope="Calories")

    def test_filter_does_not_change_state(self, manager) -> None:
        assert names(manager.filter("5", SearchScope.RATING)) == ["Chicken and Potatoes"]
        assert not manager.is_filtering()

    def test_row_at_out_of_range(self, manager) -> None:
        with pytest.raises(IndexError):
            manager.row_at(3)
        with pytest.raises(IndexError):
            manager.row_at(-1)

    def test_filtered_view_is_subset_in_order(self, manager) -> None:
        manager.upsert(Meal("Pasta Salad", 2))
        manager.update_search(text="a", active=True)
        meals = manager.meals
        positions = [meals.index(m) for m in manager.filtered_meals]
        assert positions == sorted(positions)


class TestDelete:
    """Tests for deleting rows."""

    def test_delete_unfiltered_by_position(self, manager, store, display) -> None:
        deleted = manager.delete(1)
        assert deleted.name == "Chicken and Potatoes"
        assert names(manager.meals) == ["Caprese Salad", "Pasta with Meatballs"]
        assert display.last == ("deleted", [1])
        assert store.read() == manager.meals

    def test_delete_only_filtered_match(self, manager, store, display) -> None:
        manager.update_search(text="pasta", active=True)
        manager.delete(0)

        assert manager.row_count() == 0
        assert display.last == ("deleted", [0])
        manager.clear_search()
        assert manager.row_count() == 2
        assert "Pasta with Meatballs" not in names(manager.meals)
        assert len(store.read()) == 2

    def test_delete_filtered_picks_the_right_duplicate(self, store) -> None:
        store.write([Meal("Soup", 1), Meal("Toast", 2), Meal("Soup", 1)])
        manager = MealListManager(store)
        manager.load()
        manager.update_search(text="soup", active=True)
        manager.delete(1)
        assert manager.meals == [Meal("Soup", 1), Meal("Toast", 2)]
        assert manager.filtered_meals == [Meal("Soup", 1)]

    def test_delete_out_of_range(self, manager) -> None:
        with pytest.raises(IndexError):
            manager.delete(5)
        assert manager.row_count() == 3

    def test_save_failure_keeps_memory_state(self, tmp_path, caplog) -> None:
        manager = MealListManager(FailingStore(tmp_path / "meals.json"))
        manager.load()
        with caplog.at_level(logging.ERROR):
            manager.delete(0)
        assert manager.row_count() == 2
        assert "Failed to save meals" in caplog.text


class TestUpsertAdd:
    """Tests for adding meals."""

    def test_add_unfiltered_appends(self, manager, store, display) -> None:
        row = manager.upsert(Meal("Tacos", 5))
        assert row == 3
        assert names(manager.meals)[-1] == "Tacos"
        assert display.last == ("inserted", [3])
        assert store.read() == manager.meals

    def test_add_matching_while_filtering(self, manager, display) -> None:
        manager.update_search(text="pasta", active=True)
        row = manager.upsert(Meal("Pasta Carbonara", 4))
        assert row == 1
        assert names(manager.visible_meals()) == ["Pasta with Meatballs", "Pasta Carbonara"]
        assert display.last == ("inserted", [1])
        assert names(manager.meals)[-1] == "Pasta Carbonara"

    def test_add_not_matching_while_filtering(self, manager, store, display) -> None:
        manager.update_search(text="pasta", active=True)
        display.events.clear()
        row = manager.upsert(Meal("Tacos", 5))
        assert row is None
        assert manager.row_count() == 1
        assert display.events == []
        assert names(manager.meals)[-1] == "Tacos"
        assert len(store.read()) == 4

    def test_add_then_search_sees_new_meal(self, manager) -> None:
        manager.upsert(Meal("Pasta Bake", 2))
        manager.update_search(text="pasta", active=True)
        assert manager.row_count() == 2


class TestUpsertEdit:
    """Tests for replacing meals."""

    def test_edit_unfiltered(self, manager, store, display) -> None:
        edited = manager.row_at(0).with_changes(rating=1)
        row = manager.upsert(edited, 0)
        assert row == 0
        assert manager.meals[0] == Meal("Caprese Salad", 1)
        assert display.last == ("reloaded", [0])
        assert store.read()[0] == Meal("Caprese Salad", 1)

    def test_edit_still_matching(self, manager, display) -> None:
        manager.update_search(text="pasta", active=True)
        edited = manager.row_at(0).with_changes(rating=5)
        row = manager.upsert(edited, 0)
        assert row == 0
        assert manager.row_at(0) == Meal("Pasta with Meatballs", 5)
        assert manager.meals[2] == Meal("Pasta with Meatballs", 5)
        assert display.last == ("reloaded", [0])

    def test_edit_no_longer_matching(self, manager, store, display) -> None:
        manager.update_search(text="pasta", active=True)
        edited = manager.row_at(0).with_changes(name="Spaghetti with Meatballs")
        row = manager.upsert(edited, 0)

        assert row is None
        assert manager.row_count() == 0
        assert display.last == ("deleted", [0])
        assert manager.meals[2] == Meal("Spaghetti with Meatballs", 3)
        assert store.read()[2].name == "Spaghetti with Meatballs"

    def test_edit_rating_scope_no_longer_matching(self, manager) -> None:
        manager.update_search(text="5", scope="Rating", active=True)
        manager.upsert(manager.row_at(0).with_changes(rating=4), 0)
        assert manager.row_count() == 0
        assert manager.meals[1] == Meal("Chicken and Potatoes", 4)

    def test_edit_of_unknown_filtered_meal_reloads_row(self, manager, display) -> None:
        """A filtered meal missing from the full list is left as is but redrawn."""
        manager.update_search(text="pasta", active=True)
        manager._filtered[0] = Meal("Pasta Primavera", 2)
        before = manager.meals

        row = manager.upsert(Meal("Pasta Bake", 1), 0)

        assert row == 0
        assert manager.meals == before
        assert display.last == ("reloaded", [0])

    def test_edit_out_of_range(self, manager) -> None:
        with pytest.raises(IndexError):
            manager.upsert(Meal("Soup", 1), 7)


class TestRatingPolicy:
    """The manager uses one rating policy for filtering and edit checks."""

    def test_exact_policy_default(self, manager) -> None:
        assert manager.rating_match is RatingMatch.EXACT

    def test_contains_policy(self, store) -> None:
        manager = MealListManager(store, rating_match="contains")
        manager.load()
        manager.update_search(text="4", scope="Rating", active=True)
        assert names(manager.visible_meals()) == ["Caprese Salad"]
        assert manager.matches_search(Meal("Soup", 4))

    def test_policy_any_case(self, store) -> None:
        assert MealListManager(store, rating_match="Exact").rating_match is RatingMatch.EXACT
        assert MealListManager(store, rating_match="CONTAINS").rating_match is RatingMatch.CONTAINS

    def test_unknown_policy(self, store) -> None:
        with pytest.raises(ValueError):
            MealListManager(store, rating_match="fuzzy")

    def test_default_scope(self, store) -> None:
        manager = MealListManager(store, default_scope="rating")
        assert manager.search.scope is SearchScope.RATING
