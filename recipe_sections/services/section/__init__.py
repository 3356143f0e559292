"""Section module with reordering, validation, normalization, and layout conversion components."""

# Re-export submodules for direct access if needed
from recipe_sections.services.section.conversion import (
    blank_item,
    flat_to_sectioned,
    sectioned_to_flat,
    toggle_mode,
)
from recipe_sections.services.section.normalization import (
    NormalizationSummary,
    fold_unsectioned_items,
    normalize_existing_recipe,
    normalize_imported_recipe,
)
from recipe_sections.services.section.reordering import (
    auto_correct_positions,
    detect_position_conflicts,
    find_position_problems,
    move_between_scopes,
    next_position,
    reindex_positions,
    reorder_within_scope,
    sort_by_rank,
)
from recipe_sections.services.section.validation import RecipeValidator, ValidationResult

__all__ = [
    "NormalizationSummary",
    "RecipeValidator",
    "ValidationResult",
    "auto_correct_positions",
    "blank_item",
    "detect_position_conflicts",
    "find_position_problems",
    "flat_to_sectioned",
    "fold_unsectioned_items",
    "move_between_scopes",
    "next_position",
    "normalize_existing_recipe",
    "normalize_imported_recipe",
    "reindex_positions",
    "reorder_within_scope",
    "sectioned_to_flat",
    "sort_by_rank",
    "toggle_mode",
]
