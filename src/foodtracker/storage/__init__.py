"""Meal archive persistence."""

from foodtracker.storage.store import MealStore, get_store, set_store

__all__ = ["MealStore", "get_store", "set_store"]
