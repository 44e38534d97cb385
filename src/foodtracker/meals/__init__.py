"""Meal list: models, search and the list manager."""

from __future__ import annotations

from foodtracker.meals.display import MealListDisplay, NullDisplay
from foodtracker.meals.manager import MealListManager
from foodtracker.meals.models import (
    MAX_RATING,
    Meal,
    RatingMatch,
    SearchScope,
    SearchState,
)
from foodtracker.meals.samples import sample_meals
from foodtracker.meals.search import filter_meals, meal_matches

__all__ = [
    "MAX_RATING",
    "Meal",
    "MealListDisplay",
    "MealListManager",
    "NullDisplay",
    "RatingMatch",
    "SearchScope",
    "SearchState",
    "filter_meals",
    "meal_matches",
    "sample_meals",
]
