"""Section service layer for in-memory section and item management."""

import copy
import logging
from typing import Any

from recipe_sections.config import get_settings
from recipe_sections.exceptions import NotFoundError, ValidationError
from recipe_sections.models.layout import (
    ORDER_KEY,
    POSITION_KEY,
    ItemKind,
    generate_id,
    new_item,
    new_section,
)
from recipe_sections.services.section.reordering import (
    PositionConflictReport,
    auto_correct_positions,
    detect_position_conflicts,
    move_between_scopes,
    reorder_within_scope,
)

logger = logging.getLogger(__name__)


class SectionService:
    """Holds one kind's section list and keeps its orders and positions contiguous.

    A section that loses its last item is flagged empty. The flag is advisory
    and cleared as soon as the section receives an item again; saving an empty
    section is rejected by validation, not here.
    """

    def __init__(self, kind: ItemKind, sections: list[dict[str, Any]] | None = None):
        """
        Initialize the store with an existing section list.

        Args:
            kind: Kind of items held by the sections
            sections: Initial sections in display order (copied)
        """
        self.kind = ItemKind(kind)
        self._sections: list[dict[str, Any]] = copy.deepcopy(list(sections or []))
        self._empty: set[str] = {s["id"] for s in self._sections if not s.get("items")}

    @property
    def sections(self) -> list[dict[str, Any]]:
        """Copy of the current sections."""
        return copy.deepcopy(self._sections)

    @property
    def empty_section_ids(self) -> set[str]:
        """IDs of sections currently flagged empty."""
        return set(self._empty)

    def is_empty(self, section_id: str) -> bool:
        """Check whether a section is flagged empty."""
        self._index_of(section_id)
        return section_id in self._empty

    def get_section(self, section_id: str) -> dict[str, Any]:
        """
        Get a copy of a section by ID.

        Raises:
            NotFoundError: If no section has this ID
        """
        return copy.deepcopy(self._sections[self._index_of(section_id)])

    def _index_of(self, section_id: str) -> int:
        for index, section in enumerate(self._sections):
            if section["id"] == section_id:
                return index
        raise NotFoundError("Section", section_id)

    def _set_items(self, index: int, items: list[dict[str, Any]]) -> None:
        section = self._sections[index]
        section["items"] = items
        if items:
            self._empty.discard(section["id"])
        else:
            self._empty.add(section["id"])

    # Section operations

    def add_section(self, name: str | None = None) -> dict[str, Any]:
        """
        Append a new, empty section.

        Args:
            name: Section name; blank names take the configured default

        Returns:
            Copy of the created section
        """
        if name is None or not name.strip():
            name = get_settings().new_section_name
        section = new_section(name.strip(), order=len(self._sections))
        self._sections.append(section)
        self._empty.add(section["id"])
        return copy.deepcopy(section)

    def remove_section(self, section_id: str) -> bool:
        """
        Remove a section and renumber the remaining sections.

        Returns:
            True if the section was removed, False if not found
        """
        try:
            index = self._index_of(section_id)
        except NotFoundError:
            return False
        remaining = self._sections[:index] + self._sections[index + 1:]
        self._sections = auto_correct_positions(remaining, key=ORDER_KEY)
        self._empty.discard(section_id)
        return True

    def rename_section(self, section_id: str, name: str) -> dict[str, Any]:
        """
        Rename a section. Names are trimmed and may repeat across sections.

        Raises:
            ValidationError: If the name is empty or whitespace only
            NotFoundError: If no section has this ID
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Section name is required and cannot be empty", "name")
        index = self._index_of(section_id)
        self._sections[index]["name"] = name.strip()
        return copy.deepcopy(self._sections[index])

    def reorder_sections(self, from_index: int, to_index: int) -> list[dict[str, Any]]:
        """
        Move a section to a new index in the section list.

        Raises:
            InvalidIndexError: If either index is out of range
        """
        self._sections = reorder_within_scope(self._sections, from_index, to_index, key=ORDER_KEY)
        return self.sections

    def reorder_sections_by_id(self, section_order: list[str]) -> list[dict[str, Any]]:
        """
        Put sections in the order given by a full list of their IDs.

        Raises:
            ValidationError: If section_order is not a permutation of the current IDs
        """
        if not isinstance(section_order, list):
            raise ValidationError("section_order must be a list", "section_order")
        current = {s["id"]: s for s in self._sections}
        if len(section_order) != len(current) or set(section_order) != set(current):
            raise ValidationError(
                "section_order must list every section ID exactly once", "section_order"
            )
        self._sections = auto_correct_positions(
            [current[section_id] for section_id in section_order], key=ORDER_KEY
        )
        return self.sections

    # Item operations

    def add_item(
        self,
        section_id: str,
        item: dict[str, Any] | None = None,
        **fields: Any,
    ) -> dict[str, Any]:
        """
        Append an item to a section.

        Args:
            section_id: Target section ID
            item: Item to copy in; a blank item of the store's kind when omitted
            **fields: Field overrides applied to the item

        Returns:
            Copy of the stored item, with its ID and position assigned

        Raises:
            NotFoundError: If no section has this ID
        """
        index = self._index_of(section_id)
        items = list(self._sections[index]["items"])
        fields.pop(POSITION_KEY, None)
        if item is None:
            stored = new_item(self.kind, position=len(items), **fields)
        else:
            stored = copy.deepcopy(item)
            stored.update(fields)
            if not stored.get("id"):
                stored["id"] = generate_id()
        stored[POSITION_KEY] = len(items)
        items.append(stored)
        self._set_items(index, items)
        return copy.deepcopy(stored)

    def update_item(self, section_id: str, item_id: str, **fields: Any) -> dict[str, Any]:
        """
        Edit an item's domain fields in place. ID and position are left alone.

        Raises:
            NotFoundError: If the section or item does not exist
        """
        index = self._index_of(section_id)
        for item in self._sections[index]["items"]:
            if item["id"] == item_id:
                item.update(
                    {k: v for k, v in fields.items() if k not in ("id", POSITION_KEY)}
                )
                return copy.deepcopy(item)
        raise NotFoundError("Item", item_id)

    def remove_item(self, section_id: str, item_id: str) -> bool:
        """
        Remove an item and renumber its siblings.

        Returns:
            True if the item was removed, False if the section has no such item

        Raises:
            NotFoundError: If no section has this ID
        """
        index = self._index_of(section_id)
        items = self._sections[index]["items"]
        remaining = [item for item in items if item["id"] != item_id]
        if len(remaining) == len(items):
            return False
        self._set_items(index, auto_correct_positions(remaining))
        return True

    def reorder_items(self, section_id: str, from_index: int, to_index: int) -> list[dict[str, Any]]:
        """
        Move an item to a new index inside its section.

        Raises:
            NotFoundError: If no section has this ID
            InvalidIndexError: If either index is out of range
        """
        index = self._index_of(section_id)
        self._set_items(
            index, reorder_within_scope(self._sections[index]["items"], from_index, to_index)
        )
        return copy.deepcopy(self._sections[index]["items"])

    def move_item(
        self,
        source_section_id: str,
        dest_section_id: str,
        source_index: int,
        dest_index: int,
    ) -> dict[str, Any]:
        """
        Move an item from one section to another.

        Both sections are updated together, so the item is never in both or
        neither.

        Returns:
            Copy of the moved item as stored in the destination

        Raises:
            NotFoundError: If either section does not exist
            InvalidIndexError: If source_index is out of range
        """
        if source_section_id == dest_section_id:
            items = self.reorder_items(source_section_id, source_index, dest_index)
            return items[dest_index]

        source = self._index_of(source_section_id)
        dest = self._index_of(dest_section_id)
        result = move_between_scopes(
            self._sections[source]["items"],
            self._sections[dest]["items"],
            source_index,
            dest_index,
        )
        self._set_items(source, result.source_items)
        self._set_items(dest, result.dest_items)
        return copy.deepcopy(result.moved_item)

    def repair_positions(self) -> list[PositionConflictReport]:
        """
        Rewrite section orders and item positions to follow the current list order.

        Returns:
            Conflict reports for every scope that had duplicated ranks, the
            section list first
        """
        reports = []
        section_report = detect_position_conflicts(self._sections, key=ORDER_KEY)
        if section_report.has_conflicts:
            reports.append(section_report)
        self._sections = auto_correct_positions(self._sections, key=ORDER_KEY)

        for index, section in enumerate(self._sections):
            report = detect_position_conflicts(section["items"])
            if report.has_conflicts:
                reports.append(report)
            self._set_items(index, auto_correct_positions(section["items"]))

        if reports:
            logger.debug("Repaired %d %s scopes with conflicting positions", len(reports), self.kind.value)
        return reports
