"""Search predicates for the meal list.

The same predicate backs both the live filter (every keystroke or scope
change) and the check made after an add or edit, so a meal is visible in the
filtered view exactly when filtering from scratch would select it.
"""

from __future__ import annotations

from typing import Iterable, Union

from foodtracker.meals.models import Meal, RatingMatch, SearchScope


def coerce_scope(scope: Union[SearchScope, str]) -> SearchScope:
    """Convert a scope title to SearchScope.

    Raises:
        ValueError: If the scope is not Name or Rating
    """
    try:
        return SearchScope(scope)
    except ValueError:
        raise ValueError(f"Received unknown scope: {scope!r}") from None


def name_matches(name: str, text: str) -> bool:
    """Case-insensitive substring match on a meal name."""
    return text.casefold() in name.casefold()


def rating_matches(
    rating: int,
    text: str,
    policy: RatingMatch = RatingMatch.EXACT,
) -> bool:
    """Compare search text with the decimal rendering of a rating.

    Args:
        rating: Rating to test (not range checked, so multi-digit values work)
        text: Search text as typed
        policy: EXACT for string equality, CONTAINS for substring containment

    Returns:
        True if the rating matches
    """
    rendered = str(rating)
    if policy is RatingMatch.EXACT:
        return text == rendered
    return text in rendered


def meal_matches(
    meal: Meal,
    text: str,
    scope: Union[SearchScope, str],
    policy: RatingMatch = RatingMatch.EXACT,
) -> bool:
    """Return True if a meal matches search text in the given scope."""
    scope = coerce_scope(scope)
    if scope is SearchScope.NAME:
        return name_matches(meal.name, text)
    return rating_matches(meal.rating, text, policy)


def filter_meals(
    meals: Iterable[Meal],
    text: str,
    scope: Union[SearchScope, str],
    policy: RatingMatch = RatingMatch.EXACT,
) -> list[Meal]:
    """Select the meals matching search text, preserving order.

    Empty text selects every meal regardless of scope.
    """
    scope = coerce_scope(scope)
    if not text:
        return list(meals)
    return [meal for meal in meals if meal_matches(meal, text, scope, policy)]
