"""Serialization utilities for the meal archive.

These functions convert meals to plain dicts with named fields and back, so
that a list of meals written to disk can be read back as an equal list.
Photos are stored as base64 text.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Iterable

from foodtracker.meals.models import Meal

ARCHIVE_VERSION = 1


def serialize_meal(meal: Meal) -> dict[str, Any]:
    """Convert a Meal to a JSON-serializable dict.

    Args:
        meal: The meal to serialize

    Returns:
        Dictionary compatible with deserialize_meal()
    """
    photo = None
    if meal.photo is not None:
        photo = base64.b64encode(meal.photo).decode("ascii")

    return {
        "name": meal.name,
        "rating": meal.rating,
        "photo": photo,
    }


def deserialize_meal(data: dict[str, Any]) -> Meal:
    """Convert a dict produced by serialize_meal() back into a Meal.

    Args:
        data: Dictionary containing the serialized meal

    Returns:
        Meal reconstructed from the data

    Raises:
        ValueError: If a field is missing or invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping for a meal, got {type(data).__name__}")
    if "name" not in data:
        raise ValueError("Meal record is missing 'name'")

    photo = data.get("photo")
    if photo is not None:
        try:
            photo = base64.b64decode(photo, validate=True)
        except (binascii.Error, TypeError) as e:
            raise ValueError(f"Invalid photo data for meal {data['name']!r}: {e}") from e

    return Meal(
        name=data["name"],
        rating=data.get("rating", 0),
        photo=photo,
    )


def serialize_meals(meals: Iterable[Meal]) -> dict[str, Any]:
    """Convert a full meal list to the archive document."""
    return {
        "version": ARCHIVE_VERSION,
        "meals": [serialize_meal(meal) for meal in meals],
    }


def deserialize_meals(data: Any) -> list[Meal]:
    """Convert an archive document back into a meal list.

    A bare list of meal records is accepted as well as the versioned
    document written by serialize_meals().

    Raises:
        ValueError: If the document or any record is malformed
    """
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict):
        version = data.get("version", ARCHIVE_VERSION)
        if version != ARCHIVE_VERSION:
            raise ValueError(f"Unsupported archive version: {version!r}")
        records = data.get("meals")
        if not isinstance(records, list):
            raise ValueError("Archive is missing a 'meals' list")
    else:
        raise ValueError(f"Unexpected archive type: {type(data).__name__}")

    return [deserialize_meal(record) for record in records]
