"""Sample meals shown on first run."""

from __future__ import annotations

from foodtracker.meals.models import Meal

SAMPLE_MEALS = (
    ("Caprese Salad", 4),
    ("Chicken and Potatoes", 5),
    ("Pasta with Meatballs", 3),
)


def sample_meals() -> list[Meal]:
    """Build a fresh copy of the sample set (photos unset)."""
    return [Meal(name=name, rating=rating) for name, rating in SAMPLE_MEALS]
