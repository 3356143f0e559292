"""Storage layer for Recipe-Sections."""

from recipe_sections.storage.database import Database, get_db, reset_db
from recipe_sections.storage.repositories import RecipeRepository

__all__ = [
    "Database",
    "get_db",
    "reset_db",
    "RecipeRepository",
]
