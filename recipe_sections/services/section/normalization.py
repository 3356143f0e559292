"""Repair of recipe documents coming from imports or older storage.

Imported documents are often incomplete: sections without names, items with
no text, missing IDs or ranks. Normalizing turns such a document into one the
editor can work with, and counts what it had to change.
"""

import copy
import logging
from dataclasses import asdict, dataclass
from typing import Any

from recipe_sections.config import get_settings
from recipe_sections.exceptions import ValidationError
from recipe_sections.models.layout import (
    ORDER_KEY,
    ItemKind,
    generate_id,
    new_section,
)
from recipe_sections.services.section.reordering import (
    auto_correct_positions,
    is_rank,
    sort_by_rank,
)

logger = logging.getLogger(__name__)


@dataclass
class NormalizationSummary:
    """Counts of the repairs made while normalizing a recipe."""

    sections_renamed: int = 0
    sections_flattened: int = 0
    items_dropped: int = 0
    ids_generated: int = 0
    positions_assigned: int = 0

    @property
    def has_changes(self) -> bool:
        return any(asdict(self).values())

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    def message(self) -> str:
        """One-line description of the repairs, for showing to the user."""
        parts = []
        if self.sections_flattened:
            parts.append(f"removed {self.sections_flattened} empty section(s)")
        if self.sections_renamed:
            parts.append(f"renamed {self.sections_renamed} section(s)")
        if self.items_dropped:
            parts.append(f"dropped {self.items_dropped} empty item(s)")
        if self.ids_generated:
            parts.append(f"generated {self.ids_generated} ID(s)")
        if self.positions_assigned:
            parts.append(f"assigned {self.positions_assigned} position(s)")
        if not parts:
            return "No changes needed"
        return "Fixed: " + ", ".join(parts)

    def __str__(self) -> str:
        return self.message()


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_items(
    items: list[dict[str, Any]] | None,
    kind: ItemKind,
    summary: NormalizationSummary | None = None,
) -> list[dict[str, Any]]:
    """
    Normalize the items of one scope.

    Items that are not objects or have no text are dropped. Kept items get a
    trimmed text, an ID, and kind defaults (ingredient amount 0 and unit "",
    instruction step by list order). They are then sorted by stored position,
    with missing positions taking the item's list index, and renumbered 0..n-1.

    Args:
        items: Items of one scope
        kind: Item kind
        summary: Summary to add counts to

    Returns:
        New list of normalized items
    """
    kind = ItemKind(kind)
    summary = summary if summary is not None else NormalizationSummary()
    if not isinstance(items, list):
        items = []

    kept: list[dict[str, Any]] = []
    for item in items:
        text = _text(item.get(kind.text_field)) if isinstance(item, dict) else ""
        if not text:
            summary.items_dropped += 1
            continue

        normalized = copy.deepcopy(item)
        normalized[kind.text_field] = text
        if not normalized.get("id"):
            normalized["id"] = generate_id()
            summary.ids_generated += 1
        if not is_rank(normalized.get("position")):
            summary.positions_assigned += 1

        if kind is ItemKind.INGREDIENT:
            if normalized.get("amount") is None:
                normalized["amount"] = 0
            if normalized.get("unit") is None:
                normalized["unit"] = ""
        elif normalized.get("step") is None:
            normalized["step"] = len(kept) + 1
        kept.append(normalized)

    return auto_correct_positions(sort_by_rank(kept))


def normalize_sections(
    sections: list[dict[str, Any]] | None,
    kind: ItemKind,
    summary: NormalizationSummary | None = None,
) -> list[dict[str, Any]]:
    """
    Normalize a section list.

    Sections are sorted by stored order, with missing orders taking the
    section's list index. A section without a name is renamed to the
    configured import name. A section left with no items after its items are
    normalized is removed. Orders are renumbered 0..n-1.
    """
    kind = ItemKind(kind)
    summary = summary if summary is not None else NormalizationSummary()
    if not isinstance(sections, list):
        sections = []

    kept: list[dict[str, Any]] = []
    for section in sort_by_rank(sections, key=ORDER_KEY):
        if not isinstance(section, dict):
            summary.sections_flattened += 1
            continue

        name = _text(section.get("name"))
        if not name:
            name = get_settings().imported_section_name
            summary.sections_renamed += 1

        items = normalize_items(section.get("items"), kind, summary)
        if not items:
            summary.sections_flattened += 1
            continue

        normalized = {k: copy.deepcopy(v) for k, v in section.items() if k != "items"}
        if not normalized.get("id"):
            normalized["id"] = generate_id()
            summary.ids_generated += 1
        if not is_rank(normalized.get(ORDER_KEY)):
            summary.positions_assigned += 1
        normalized["name"] = name
        normalized["items"] = items
        kept.append(normalized)

    return auto_correct_positions(kept, key=ORDER_KEY)


def normalize_imported_recipe(
    payload: dict[str, Any],
    summary: NormalizationSummary | None = None,
) -> dict[str, Any]:
    """
    Normalize a recipe document from an external import.

    Args:
        payload: Recipe document
        summary: Summary to add counts to; pass one in to read them afterwards

    Returns:
        New normalized document. Every list field is present, and a missing
        title is replaced with the configured placeholder.

    Raises:
        ValidationError: If payload is not an object
    """
    if not isinstance(payload, dict):
        raise ValidationError("Recipe must be an object", "recipe")
    summary = summary if summary is not None else NormalizationSummary()

    list_fields = {field for kind in ItemKind for field in (kind.flat_field, kind.sections_field)}
    normalized = {k: copy.deepcopy(v) for k, v in payload.items() if k not in list_fields}
    if not _text(normalized.get("title")):
        normalized["title"] = get_settings().untitled_recipe_title

    for kind in ItemKind:
        normalized[kind.sections_field] = normalize_sections(payload.get(kind.sections_field), kind, summary)
        normalized[kind.flat_field] = normalize_items(payload.get(kind.flat_field), kind, summary)

    if summary.has_changes:
        logger.info("Normalized recipe %s: %s", payload.get("id", "<new>"), summary.message())
    return normalized


def normalize_existing_recipe(
    payload: dict[str, Any],
    summary: NormalizationSummary | None = None,
) -> dict[str, Any]:
    """Normalize a stored recipe before editing; same rules as for imports."""
    return normalize_imported_recipe(payload, summary)


def fold_unsectioned_items(
    items: list[dict[str, Any]] | None,
    sections: list[dict[str, Any]],
    kind: ItemKind,
    name: str | None = None,
) -> list[dict[str, Any]]:
    """
    Move flat items of a sectioned recipe into a leading default section.

    A document can carry both a flat list and sections for the same kind.
    Flat items whose IDs already appear in a section are treated as a stale
    copy and skipped. Any others go into a new section at order 0 and the
    existing sections follow it, renumbered.

    Args:
        items: Flat items of the kind
        sections: Section list of the kind
        kind: Item kind, used to pick the default section name
        name: Name of the new section; defaults to the configured name

    Returns:
        New section list
    """
    kind = ItemKind(kind)
    sectioned_ids = {
        item.get("id")
        for section in sections
        for item in section.get("items") or []
        if isinstance(item, dict)
    }
    loose = [
        copy.deepcopy(item)
        for item in items or []
        if isinstance(item, dict) and item.get("id") not in sectioned_ids
    ]
    if not loose:
        return copy.deepcopy(sections)

    if name is None or not name.strip():
        name = get_settings().default_section_name(kind.value)
    leading = new_section(name.strip(), order=0, items=auto_correct_positions(sort_by_rank(loose)))
    logger.info("Moved %d unsectioned %s item(s) into section %r", len(loose), kind.value, leading["name"])
    return auto_correct_positions([leading] + copy.deepcopy(sort_by_rank(sections, key=ORDER_KEY)), key=ORDER_KEY)
