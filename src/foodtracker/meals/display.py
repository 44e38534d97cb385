"""Display interface driven by the meal list manager.

Any front end (terminal, GUI, test recorder) implements MealListDisplay.
The manager only ever calls these methods; it reads nothing back, and all
row numbers refer to the visible sequence (filtered or full) at the time of
the call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class MealListDisplay(ABC):
    """Receives change notifications for the visible meal rows."""

    @abstractmethod
    def reload_data(self) -> None:
        """The visible sequence changed wholesale (load, new search)."""

    @abstractmethod
    def rows_inserted(self, rows: list[int]) -> None:
        """Rows were appended or inserted at these positions."""

    @abstractmethod
    def rows_deleted(self, rows: list[int]) -> None:
        """Rows at these positions were removed."""

    @abstractmethod
    def rows_reloaded(self, rows: list[int]) -> None:
        """Rows at these positions hold a replaced meal."""


class NullDisplay(MealListDisplay):
    """Display that ignores every notification."""

    def reload_data(self) -> None:
        pass

    def rows_inserted(self, rows: list[int]) -> None:
        pass

    def rows_deleted(self, rows: list[int]) -> None:
        pass

    def rows_reloaded(self, rows: list[int]) -> None:
        pass
