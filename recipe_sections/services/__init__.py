"""Service layer for business logic and validation."""

from recipe_sections.services.editor import RecipeEditor
from recipe_sections.services.recipe_service import RecipeService
from recipe_sections.services.section_service import SectionService

__all__ = ["RecipeEditor", "RecipeService", "SectionService"]
