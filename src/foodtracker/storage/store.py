"""Whole-collection meal archive stored as a JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from foodtracker.meals.models import Meal
from foodtracker.meals.serialization import deserialize_meals, serialize_meals

logger = logging.getLogger(__name__)


class MealStore:
    """Reads and overwrites the full meal list at one fixed location.

    There are only two operations: read everything, write everything.
    Absence of the file (first run) is reported as "no data", as is any file
    that cannot be decoded into a valid meal list.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Path to the JSON archive file
        """
        self.path = Path(path)

    def _ensure_directory(self) -> None:
        """Create parent directories if they don't exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def read(self) -> Optional[list[Meal]]:
        """Read the persisted meal list.

        Returns:
            The stored meals (possibly empty), or None if nothing usable is stored
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No meal archive at %s", self.path)
            return None
        except OSError as e:
            logger.warning("Could not read meal archive %s: %s", self.path, e)
            return None
        except UnicodeDecodeError as e:
            logger.warning("Ignoring corrupt meal archive %s: %s", self.path, e)
            return None

        if not raw.strip():
            logger.warning("Meal archive %s is empty", self.path)
            return None

        try:
            data = json.loads(raw)
            meals = deserialize_meals(data)
        except (ValueError, TypeError, KeyError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError too; deep nesting recurses
            logger.warning("Ignoring corrupt meal archive %s: %s", self.path, e)
            return None

        logger.debug("Loaded %d meals from %s", len(meals), self.path)
        return meals

    def write(self, meals: Iterable[Meal]) -> bool:
        """Overwrite the archive with the given meals.

        The document is written to a temporary file in the same directory
        and renamed over the archive, so a failed write never leaves a
        half-written file behind.

        Returns:
            True if the archive was written
        """
        payload = json.dumps(serialize_meals(meals), indent=2)
        tmp_name = None
        try:
            self._ensure_directory()
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error("Could not write meal archive %s: %s", self.path, e)
            return False
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        return True

    def exists(self) -> bool:
        return self.path.exists()


# Global store instance (lazy loaded)
_store: Optional[MealStore] = None


def get_store() -> MealStore:
    """Get the global store instance.

    Lazily initializes the store using settings.

    Returns:
        MealStore instance
    """
    global _store
    if _store is None:
        from foodtracker.config import get_settings

        settings = get_settings()
        _store = MealStore(settings.storage.path)
    return _store


def set_store(store: Optional[MealStore]) -> None:
    """Set the global store instance.

    Useful for testing with a temporary archive. Passing None resets it so
    the next get_store() call reads settings again.

    Args:
        store: MealStore instance to use
    """
    global _store
    _store = store
