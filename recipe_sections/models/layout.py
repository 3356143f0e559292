"""In-memory shapes for ingredient and instruction lists.

Items and sections are plain dicts so they can be handed straight to JSON
serialization. A kind's list is held either as a ``FlatLayout`` or as a
``SectionedLayout``; nothing else is a valid layout.
"""

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

# Scope id used by drag-and-drop callers for the flat (unsectioned) list
FLAT_SCOPE_ID = "flat"

POSITION_KEY = "position"
ORDER_KEY = "order"


class ItemKind(str, Enum):
    """The two kinds of positioned recipe items."""

    INGREDIENT = "ingredient"
    INSTRUCTION = "instruction"

    @property
    def flat_field(self) -> str:
        """Payload key of the flat list for this kind."""
        return "ingredients" if self is ItemKind.INGREDIENT else "instructions"

    @property
    def sections_field(self) -> str:
        """Payload key of the section list for this kind."""
        return "ingredient_sections" if self is ItemKind.INGREDIENT else "instruction_sections"

    @property
    def text_field(self) -> str:
        """Item field holding the text an item cannot be saved without."""
        return "name" if self is ItemKind.INGREDIENT else "content"


class LayoutMode(str, Enum):
    """Which representation a kind's list currently uses."""

    FLAT = "flat"
    SECTIONED = "sectioned"


@dataclass
class FlatLayout:
    """A single ordered list of items."""

    items: list[dict[str, Any]] = field(default_factory=list)

    @property
    def mode(self) -> LayoutMode:
        return LayoutMode.FLAT

    def copy(self) -> "FlatLayout":
        return FlatLayout(items=copy.deepcopy(self.items))


@dataclass
class SectionedLayout:
    """An ordered list of named sections, each holding its own ordered items."""

    sections: list[dict[str, Any]] = field(default_factory=list)

    @property
    def mode(self) -> LayoutMode:
        return LayoutMode.SECTIONED

    def copy(self) -> "SectionedLayout":
        return SectionedLayout(sections=copy.deepcopy(self.sections))


Layout = Union[FlatLayout, SectionedLayout]


def generate_id() -> str:
    """Generate a new item or section ID."""
    return str(uuid.uuid4())


def new_item(kind: ItemKind, position: int = 0, **fields: Any) -> dict[str, Any]:
    """
    Build a new item of the given kind with a generated ID.

    Args:
        kind: Item kind
        position: Rank within its scope
        **fields: Domain fields overriding the kind's blank defaults

    Returns:
        Item dict
    """
    if ItemKind(kind) is ItemKind.INGREDIENT:
        item: dict[str, Any] = {"id": generate_id(), "name": "", "amount": 0, "unit": ""}
    else:
        item = {"id": generate_id(), "step": position + 1, "content": ""}
    item.update(fields)
    item[POSITION_KEY] = position
    return item


def new_section(name: str, order: int = 0, items: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build a new section with a generated ID."""
    return {
        "id": generate_id(),
        "name": name,
        ORDER_KEY: order,
        "items": list(items or []),
    }


def layout_from_payload(payload: dict[str, Any], kind: ItemKind) -> Layout:
    """
    Pick the active layout for a kind out of a recipe payload.

    A kind is sectioned when its section list is non-empty; otherwise its
    flat list is used.
    """
    kind = ItemKind(kind)
    sections = payload.get(kind.sections_field) or []
    if sections:
        return SectionedLayout(sections=copy.deepcopy(sections))
    return FlatLayout(items=copy.deepcopy(payload.get(kind.flat_field) or []))
