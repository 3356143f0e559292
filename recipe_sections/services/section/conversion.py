"""Conversion between the flat and sectioned list layouts."""

import copy
from typing import Any

from recipe_sections.config import get_settings
from recipe_sections.models.layout import (
    ORDER_KEY,
    POSITION_KEY,
    FlatLayout,
    ItemKind,
    Layout,
    LayoutMode,
    SectionedLayout,
    new_item,
    new_section,
)
from recipe_sections.services.section.reordering import auto_correct_positions, sort_by_rank


def blank_item(kind: ItemKind) -> dict[str, Any]:
    """Placeholder item shown when a flat list would otherwise be empty."""
    return new_item(ItemKind(kind), position=0)


def flat_to_sectioned(
    items: list[dict[str, Any]],
    kind: ItemKind,
    name: str | None = None,
) -> list[dict[str, Any]]:
    """
    Wrap a flat list into a single default section.

    Args:
        items: Flat items in display order
        kind: Item kind, used to pick the default section name
        name: Section name; defaults to the configured name for the kind

    Returns:
        Section list holding one section at order 0 with copies of the items
    """
    if name is None or not name.strip():
        name = get_settings().default_section_name(ItemKind(kind).value)
    section_items = auto_correct_positions(copy.deepcopy(list(items or [])))
    return [new_section(name.strip(), order=0, items=section_items)]


def sectioned_to_flat(
    sections: list[dict[str, Any]],
    kind: ItemKind,
) -> list[dict[str, Any]]:
    """
    Flatten sections into one list, discarding the section wrappers.

    Items are taken in (section order, item position) order. Instruction step
    numbers are rewritten to follow the new flat order. An empty result is
    replaced with a single blank item so the list is never empty while edited.
    """
    kind = ItemKind(kind)
    flat: list[dict[str, Any]] = []
    for section in sort_by_rank(sections, key=ORDER_KEY):
        items = sort_by_rank(section.get("items") or [], key=POSITION_KEY)
        flat.extend(copy.deepcopy(item) for item in items)

    if not flat:
        return [blank_item(kind)]

    flat = auto_correct_positions(flat)
    if kind is ItemKind.INSTRUCTION:
        for index, item in enumerate(flat):
            item["step"] = index + 1
    return flat


def to_sectioned(layout: Layout, kind: ItemKind, name: str | None = None) -> SectionedLayout:
    """Convert a layout to the sectioned representation."""
    if isinstance(layout, SectionedLayout):
        return layout.copy()
    return SectionedLayout(sections=flat_to_sectioned(layout.items, kind, name))


def to_flat(layout: Layout, kind: ItemKind) -> FlatLayout:
    """Convert a layout to the flat representation."""
    if isinstance(layout, FlatLayout):
        return layout.copy()
    return FlatLayout(items=sectioned_to_flat(layout.sections, kind))


def toggle_mode(layout: Layout, kind: ItemKind) -> Layout:
    """Switch a layout to the other representation."""
    if layout.mode is LayoutMode.FLAT:
        return to_sectioned(layout, kind)
    return to_flat(layout, kind)
