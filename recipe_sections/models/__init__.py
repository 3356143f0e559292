"""Data models for Recipe-Sections."""

from recipe_sections.models.layout import (
    FLAT_SCOPE_ID,
    FlatLayout,
    ItemKind,
    Layout,
    LayoutMode,
    SectionedLayout,
)
from recipe_sections.models.recipe import Recipe

__all__ = [
    "FLAT_SCOPE_ID",
    "FlatLayout",
    "ItemKind",
    "Layout",
    "LayoutMode",
    "Recipe",
    "SectionedLayout",
]
