"""Meal list tracking with search, editing and local persistence."""

__version__ = "0.1.0"
