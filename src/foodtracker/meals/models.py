"""Data models for the meal list."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


MAX_RATING = 5


class SearchScope(Enum):
    """Field a search term is matched against."""

    NAME = "Name"
    RATING = "Rating"

    @classmethod
    def _missing_(cls, value: object) -> Optional["SearchScope"]:
        # Accept "name" / "RATING" from the command line
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class RatingMatch(Enum):
    """How search text is compared with a meal's rating."""

    EXACT = "exact"  # "4" matches 4 only
    CONTAINS = "contains"  # "1" matches 1, 10, 15, ...

    @classmethod
    def _missing_(cls, value: object) -> Optional["RatingMatch"]:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().lower():
                    return member
        return None


@dataclass(frozen=True)
class Meal:
    """A named, rated, optionally illustrated meal.

    Meals are immutable; an edit produces a new instance through
    with_changes(), which runs the same validation as the constructor.

    Attributes:
        name: Display name, must contain a non-whitespace character
        rating: Integer rating from 0 to MAX_RATING
        photo: Raw image bytes, or None when no photo was chosen
    """

    name: str
    rating: int = 0
    photo: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            raise ValueError(f"rating must be an integer, got {self.rating!r}")
        if self.rating < 0 or self.rating > MAX_RATING:
            raise ValueError(
                f"rating must be between 0 and {MAX_RATING}, got {self.rating}"
            )
        if self.photo is not None and not isinstance(self.photo, (bytes, bytearray)):
            raise ValueError("photo must be bytes or None")
        if isinstance(self.photo, bytearray):
            object.__setattr__(self, "photo", bytes(self.photo))

    @property
    def has_photo(self) -> bool:
        return self.photo is not None

    def with_changes(self, **changes: Any) -> "Meal":
        """Return a validated copy of this meal with the given fields replaced."""
        return replace(self, **changes)


@dataclass
class SearchState:
    """Transient state of the search bar. Never persisted."""

    active: bool = False
    text: str = ""
    scope: SearchScope = SearchScope.NAME

    @property
    def is_empty(self) -> bool:
        return not self.text
