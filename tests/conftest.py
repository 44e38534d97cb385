"""Pytest fixtures for foodtracker tests."""

from __future__ import annotations

import pytest

from foodtracker.meals.display import MealListDisplay
from foodtracker.meals.manager import MealListManager
from foodtracker.storage.store import MealStore, set_store


class RecordingDisplay(MealListDisplay):
    """Display that records every notification it receives."""

    def __init__(self):
        self.events: list[tuple] = []

    def reload_data(self) -> None:
        self.events.append(("reload",))

    def rows_inserted(self, rows: list[int]) -> None:
        self.events.append(("inserted", rows))

    def rows_deleted(self, rows: list[int]) -> None:
        self.events.append(("deleted", rows))

    def rows_reloaded(self, rows: list[int]) -> None:
        self.events.append(("reloaded", rows))

    @property
    def last(self) -> tuple:
        return self.events[-1]


@pytest.fixture
def store_path(tmp_path):
    """Path to a meal archive that does not exist yet."""
    return tmp_path / "data" / "meals.json"


@pytest.fixture
def store(store_path):
    """Empty store in a temporary directory."""
    return MealStore(store_path)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def manager(store, display):
    """Manager loaded with the sample set (nothing saved yet)."""
    mgr = MealListManager(store, display=display)
    mgr.load()
    display.events.clear()
    return mgr


@pytest.fixture(autouse=True)
def reset_global_store():
    """Keep the CLI's --data override from leaking between tests."""
    yield
    set_store(None)
