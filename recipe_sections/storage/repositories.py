"""Repository pattern implementation for data access layer."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from recipe_sections.models.recipe import Recipe


class RecipeRepository:
    """Repository for recipe operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, recipe: Recipe) -> Recipe:
        """Create a new recipe."""
        self.session.add(recipe)
        self.session.flush()
        return recipe

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        """Get recipe by ID."""
        return self.session.get(Recipe, recipe_id)

    def get_all(self, limit: int = 100, offset: int = 0) -> list[Recipe]:
        """Get all recipes with pagination, newest first."""
        stmt = (
            select(Recipe)
            .order_by(Recipe.created_at.desc(), Recipe.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def search_by_title(self, title_pattern: str, limit: int = 100, offset: int = 0) -> list[Recipe]:
        """Search recipes by case-insensitive title pattern."""
        stmt = (
            select(Recipe)
            .where(Recipe.title.ilike(f"%{title_pattern}%"))
            .order_by(Recipe.created_at.desc(), Recipe.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def count(self) -> int:
        """Count stored recipes."""
        return self.session.scalar(select(func.count(Recipe.id))) or 0

    def update(self, recipe: Recipe, **fields: Any) -> Recipe:
        """Apply field updates to an existing recipe."""
        for key, value in fields.items():
            if hasattr(recipe, key):
                setattr(recipe, key, value)
        self.session.flush()
        return recipe

    def delete(self, recipe_id: str) -> bool:
        """Delete a recipe by ID."""
        recipe = self.get_by_id(recipe_id)
        if recipe:
            self.session.delete(recipe)
            return True
        return False
