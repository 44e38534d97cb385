"""In-memory meal list with a live search filter.

The manager owns two sequences: the full meal list, which is the only thing
persisted, and the filtered view, which is derived from the full list and the
current search state. Which of the two is visible (and therefore which one
row numbers address) is decided by is_filtering().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Union

from foodtracker.meals.display import MealListDisplay, NullDisplay
from foodtracker.meals.models import Meal, RatingMatch, SearchScope, SearchState
from foodtracker.meals.samples import sample_meals
from foodtracker.meals.search import coerce_scope, filter_meals, meal_matches

if TYPE_CHECKING:
    from foodtracker.storage.store import MealStore

logger = logging.getLogger(__name__)


class MealListManager:
    """Owns the meal list for one screen lifetime.

    Every mutation (delete, add, edit) is saved immediately and then
    reported to the display by visible row number.
    """

    def __init__(
        self,
        store: "MealStore",
        display: Optional[MealListDisplay] = None,
        rating_match: Union[RatingMatch, str] = RatingMatch.EXACT,
        default_scope: Union[SearchScope, str] = SearchScope.NAME,
    ):
        """Initialize the manager.

        Args:
            store: Archive the full meal list is read from and written to
            display: Receiver of row notifications; NullDisplay if omitted
            rating_match: Rating comparison policy for the Rating scope
            default_scope: Scope selected when the search bar first appears
        """
        self.store = store
        self.display = display or NullDisplay()
        self.rating_match = RatingMatch(rating_match)
        self.search = SearchState(scope=coerce_scope(default_scope))
        self._meals: list[Meal] = []
        self._filtered: list[Meal] = []

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def meals(self) -> list[Meal]:
        """Copy of the full meal list in display order."""
        return list(self._meals)

    @property
    def filtered_meals(self) -> list[Meal]:
        """Copy of the filtered view for the current search state."""
        return list(self._filtered)

    def is_filtering(self) -> bool:
        """True when the search bar is active and holds text."""
        return self.search.active and not self.search.is_empty

    def visible_meals(self) -> list[Meal]:
        """The sequence the display shows right now."""
        return list(self._visible())

    def row_count(self) -> int:
        return len(self._visible())

    def row_at(self, row: int) -> Meal:
        """Return the meal shown at a visible row.

        Raises:
            IndexError: If the row is not displayed
        """
        visible = self._visible()
        if row < 0 or row >= len(visible):
            raise IndexError(f"Row {row} is not displayed (row count {len(visible)})")
        return visible[row]

    def _visible(self) -> list[Meal]:
        return self._filtered if self.is_filtering() else self._meals

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def filter(
        self, text: str, scope: Union[SearchScope, str]
    ) -> list[Meal]:
        """Return the meals matching text in scope, in list order."""
        return filter_meals(self._meals, text, scope, self.rating_match)

    def matches_search(self, meal: Meal) -> bool:
        """Check a meal against the current search text and scope."""
        return meal_matches(meal, self.search.text, self.search.scope, self.rating_match)

    def update_search(
        self,
        text: Optional[str] = None,
        scope: Optional[Union[SearchScope, str]] = None,
        active: Optional[bool] = None,
    ) -> list[Meal]:
        """Change the search state and recompute the filtered view.

        Any argument left as None keeps its current value.

        Returns:
            The new filtered view
        """
        if scope is not None:
            self.search.scope = coerce_scope(scope)
        if text is not None:
            self.search.text = text
        if active is not None:
            self.search.active = active

        self._refilter()
        self.display.reload_data()
        return self.filtered_meals

    def clear_search(self) -> None:
        """Dismiss the search bar, showing the full list again."""
        self.update_search(text="", active=False)

    def _refilter(self) -> None:
        self._filtered = self.filter(self.search.text, self.search.scope)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> list[Meal]:
        """Load saved meals, or the sample set when nothing usable is saved.

        Never raises for storage problems; a corrupt archive counts as no data.

        Returns:
            The loaded meal list
        """
        saved = self.store.read()
        if saved is None:
            logger.info("No saved meals, loading sample data")
            self._meals = sample_meals()
        else:
            self._meals = list(saved)

        self._refilter()
        self.display.reload_data()
        return self.meals

    def save(self) -> bool:
        """Write the full meal list to the store.

        Failure is logged, not raised; the in-memory list stays authoritative.
        """
        if self.store.write(self._meals):
            logger.debug("Meals successfully saved.")
            return True
        logger.error("Failed to save meals...")
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _index_in_meals(self, meal: Meal) -> Optional[int]:
        """Locate a meal from the filtered view in the full list.

        The same object is looked for first, then an equal one.
        """
        for index, candidate in enumerate(self._meals):
            if candidate is meal:
                return index
        try:
            return self._meals.index(meal)
        except ValueError:
            return None

    def delete(self, row: int) -> Meal:
        """Delete the meal at a visible row.

        Returns:
            The deleted meal

        Raises:
            IndexError: If the row is not displayed
        """
        meal = self.row_at(row)

        if self.is_filtering():
            index = self._index_in_meals(meal)
            if index is not None:
                del self._meals[index]
            else:
                logger.warning("Filtered meal %r is not in the meal list", meal.name)
            del self._filtered[row]
        else:
            del self._meals[row]
            self._refilter()

        self.save()
        self.display.rows_deleted([row])
        return meal

    def upsert(self, meal: Meal, row: Optional[int] = None) -> Optional[int]:
        """Add a new meal, or replace the meal at a visible row.

        Args:
            meal: The meal produced by the detail editor
            row: Visible row being edited; None to add a new meal

        Returns:
            The visible row now showing the meal, or None if it is not shown

        Raises:
            IndexError: If row is given but not displayed
        """
        if row is None:
            result = self._add(meal)
        else:
            result = self._replace(meal, row)

        self.save()
        return result

    def _add(self, meal: Meal) -> Optional[int]:
        new_row: Optional[int] = None
        if self.is_filtering():
            if self.matches_search(meal):
                new_row = len(self._filtered)
                self._filtered.append(meal)
            self._meals.append(meal)
        else:
            new_row = len(self._meals)
            self._meals.append(meal)
            self._refilter()

        if new_row is not None:
            self.display.rows_inserted([new_row])
        return new_row

    def _replace(self, meal: Meal, row: int) -> Optional[int]:
        previous = self.row_at(row)

        if not self.is_filtering():
            self._meals[row] = meal
            self._refilter()
            self.display.rows_reloaded([row])
            return row

        index = self._index_in_meals(previous)
        if index is None:
            logger.warning("Edited meal %r is not in the meal list", previous.name)
            self.display.rows_reloaded([row])
            return row
        self._meals[index] = meal

        # An edit can make the meal fall out of the active search
        if not self.matches_search(meal):
            del self._filtered[row]
            self.display.rows_deleted([row])
            return None

        self._filtered[row] = meal
        self.display.rows_reloaded([row])
        return row
