"""Recipe service layer: the validation gate in front of persistence."""

import copy
import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from recipe_sections.exceptions import (
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from recipe_sections.models.layout import ORDER_KEY, ItemKind
from recipe_sections.models.recipe import Recipe
from recipe_sections.services.section.reordering import (
    auto_correct_positions,
    detect_position_conflicts,
)
from recipe_sections.services.section.validation import UUID_PATTERN, RecipeValidator
from recipe_sections.storage.repositories import RecipeRepository

logger = logging.getLogger(__name__)


class RecipeService:
    """Service layer for saving and loading recipe documents."""

    def __init__(self, session: Session):
        """
        Initialize recipe service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.recipe_repo = RecipeRepository(session)
        self.validator = RecipeValidator()

    @staticmethod
    def _validate_id(recipe_id: str) -> None:
        if not isinstance(recipe_id, str) or not UUID_PATTERN.match(recipe_id):
            raise ValidationError("Recipe ID must be a valid UUID", "id")

    @staticmethod
    def normalize_positions(payload: dict[str, Any]) -> dict[str, Any]:
        """
        Return a copy of the payload with every scope renumbered 0..n-1.

        Array order is kept; only the stored ranks change.
        """
        normalized = copy.deepcopy(payload)
        for kind in ItemKind:
            flat = normalized.get(kind.flat_field) or []
            sections = normalized.get(kind.sections_field) or []

            scopes = [flat] + [section.get("items") or [] for section in sections]
            if any(detect_position_conflicts(scope).has_conflicts for scope in scopes):
                logger.info("Repairing conflicting %s positions before save", kind.value)

            normalized[kind.flat_field] = auto_correct_positions(flat)
            normalized[kind.sections_field] = [
                {**section, "items": auto_correct_positions(section.get("items") or [])}
                for section in auto_correct_positions(sections, key=ORDER_KEY)
            ]
        return normalized

    def save_recipe(self, payload: dict[str, Any], recipe_id: str | None = None) -> Recipe:
        """
        Validate a recipe document and store it.

        Args:
            payload: Recipe document
            recipe_id: ID of the recipe to overwrite; a new recipe is created
                       when omitted or when no recipe has this ID

        Returns:
            Stored recipe

        Raises:
            RecipeValidationError: If the document fails validation (carries every issue)
            ValidationError: If recipe_id is malformed
            DatabaseError: If database operation fails
        """
        self.validator.validate_recipe(payload).raise_for_errors()

        if recipe_id is None:
            recipe_id = payload.get("id") or str(uuid.uuid4())
        self._validate_id(recipe_id)

        normalized = self.normalize_positions(payload)
        fields = {
            "title": normalized["title"].strip(),
            "description": normalized.get("description"),
            "ingredients": normalized["ingredients"],
            "instructions": normalized["instructions"],
            "ingredient_sections": normalized["ingredient_sections"],
            "instruction_sections": normalized["instruction_sections"],
        }

        try:
            recipe = self.recipe_repo.get_by_id(recipe_id)
            if recipe is None:
                recipe = self.recipe_repo.create(Recipe(id=recipe_id, **fields))
            else:
                recipe = self.recipe_repo.update(recipe, **fields)
            self.session.commit()
            # Reload expired attributes so the returned model is fully populated
            self.session.refresh(recipe)
            return recipe

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to save recipe: {str(e)}", e) from e

    def get_recipe(self, recipe_id: str) -> Recipe:
        """
        Get recipe by ID.

        Raises:
            ValidationError: If recipe_id is invalid
            NotFoundError: If recipe is not found
            DatabaseError: If database operation fails
        """
        self._validate_id(recipe_id)

        try:
            recipe = self.recipe_repo.get_by_id(recipe_id)
            if recipe is None:
                raise NotFoundError("Recipe", recipe_id)
            return recipe

        except NotFoundError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to get recipe: {str(e)}", e) from e

    def delete_recipe(self, recipe_id: str) -> bool:
        """
        Delete a recipe.

        Returns:
            True if recipe was deleted, False if not found

        Raises:
            ValidationError: If recipe_id is invalid
            DatabaseError: If database operation fails
        """
        self._validate_id(recipe_id)

        try:
            deleted = self.recipe_repo.delete(recipe_id)
            if deleted:
                self.session.commit()
            return deleted

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete recipe: {str(e)}", e) from e

    def list_recipes(
        self,
        title_pattern: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        List recipes as summaries.

        Args:
            title_pattern: Optional case-insensitive title substring
            limit: Maximum number of results (default: 100)
            offset: Number of results to skip (default: 0)

        Returns:
            List of {"id", "title"} dicts

        Raises:
            ValidationError: If limit or offset is negative
            DatabaseError: If database operation fails
        """
        if limit < 0:
            raise ValidationError("limit must be non-negative", "limit")
        if offset < 0:
            raise ValidationError("offset must be non-negative", "offset")

        try:
            if title_pattern:
                recipes = self.recipe_repo.search_by_title(title_pattern, limit=limit, offset=offset)
            else:
                recipes = self.recipe_repo.get_all(limit=limit, offset=offset)
            return [{"id": r.id, "title": r.title} for r in recipes]

        except Exception as e:
            raise DatabaseError(f"Failed to list recipes: {str(e)}", e) from e
