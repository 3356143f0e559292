"""Edit-time recipe state: one layout per item kind, driven by drop events."""

import copy
import logging
from typing import Any

from recipe_sections.exceptions import NotFoundError, ValidationError
from recipe_sections.models.layout import (
    FLAT_SCOPE_ID,
    POSITION_KEY,
    FlatLayout,
    ItemKind,
    Layout,
    LayoutMode,
    SectionedLayout,
    generate_id,
    layout_from_payload,
    new_item,
)
from recipe_sections.services.section.conversion import toggle_mode
from recipe_sections.services.section.normalization import (
    NormalizationSummary,
    fold_unsectioned_items,
    normalize_existing_recipe,
)
from recipe_sections.services.section.reordering import (
    PositionConflictReport,
    auto_correct_positions,
    detect_position_conflicts,
    reorder_within_scope,
)
from recipe_sections.services.section.validation import ValidationResult, validate_recipe
from recipe_sections.services.section_service import SectionService

logger = logging.getLogger(__name__)

LIST_FIELDS = ("ingredients", "instructions", "ingredient_sections", "instruction_sections")


class RecipeEditor:
    """Keeps a recipe's ingredient and instruction lists while the user edits them.

    Each kind is either flat or sectioned. Flat lists are held directly;
    sectioned lists are delegated to a SectionService per kind.
    """

    def __init__(self, payload: dict[str, Any] | None = None, normalize: bool = True):
        """
        Initialize the editor from a recipe payload.

        Args:
            payload: Recipe document; a kind with any sections starts sectioned
            normalize: Repair the document first (drop empty items and
                       sections, fill in names, IDs and ranks). The counts
                       are kept in ``normalization``.
        """
        payload = payload or {}
        self.normalization = NormalizationSummary()
        if normalize:
            payload = normalize_existing_recipe(payload, self.normalization)
        self._fields = {k: copy.deepcopy(v) for k, v in payload.items() if k not in LIST_FIELDS}
        self._flat: dict[ItemKind, list[dict[str, Any]]] = {}
        self._stores: dict[ItemKind, SectionService] = {}
        for kind in ItemKind:
            self._set_layout(kind, self._load_layout(payload, kind))

    @staticmethod
    def _load_layout(payload: dict[str, Any], kind: ItemKind) -> Layout:
        layout = layout_from_payload(payload, kind)
        if isinstance(layout, SectionedLayout):
            # Flat items next to sections would be lost on save
            return SectionedLayout(
                sections=fold_unsectioned_items(payload.get(kind.flat_field), layout.sections, kind)
            )
        return layout

    def _set_layout(self, kind: ItemKind, layout: Layout) -> None:
        self._flat.pop(kind, None)
        self._stores.pop(kind, None)
        if isinstance(layout, SectionedLayout):
            self._stores[kind] = SectionService(kind, layout.sections)
        else:
            self._flat[kind] = list(layout.items)

    def mode(self, kind: ItemKind) -> LayoutMode:
        """Current representation of a kind's list."""
        return LayoutMode.SECTIONED if ItemKind(kind) in self._stores else LayoutMode.FLAT

    def layout(self, kind: ItemKind) -> Layout:
        """Copy of a kind's current layout."""
        kind = ItemKind(kind)
        if kind in self._stores:
            return SectionedLayout(sections=self._stores[kind].sections)
        return FlatLayout(items=copy.deepcopy(self._flat[kind]))

    def section_store(self, kind: ItemKind) -> SectionService:
        """
        Section store of a sectioned kind.

        Raises:
            ValidationError: If the kind is currently a flat list
        """
        kind = ItemKind(kind)
        if kind not in self._stores:
            raise ValidationError(f"{kind.value} list is not organized into sections", "mode")
        return self._stores[kind]

    def toggle_mode(self, kind: ItemKind) -> LayoutMode:
        """
        Switch a kind between flat and sectioned.

        Returns:
            The new mode
        """
        kind = ItemKind(kind)
        self._set_layout(kind, toggle_mode(self.layout(kind), kind))
        logger.debug("Switched %s list to %s", kind.value, self.mode(kind).value)
        return self.mode(kind)

    def add_item(self, kind: ItemKind, section_id: str | None = None, **fields: Any) -> dict[str, Any]:
        """
        Append an item to the flat list or to a section.

        Raises:
            ValidationError: If section_id is missing for a sectioned kind
            NotFoundError: If the section does not exist
        """
        kind = ItemKind(kind)
        if kind in self._stores:
            if section_id is None:
                raise ValidationError("section_id is required for sectioned lists", "section_id")
            return self._stores[kind].add_item(section_id, **fields)

        items = self._flat[kind]
        fields.pop(POSITION_KEY, None)
        item = new_item(kind, position=len(items), **fields)
        if not item.get("id"):
            item["id"] = generate_id()
        items.append(item)
        return copy.deepcopy(item)

    def remove_item(self, kind: ItemKind, item_id: str, section_id: str | None = None) -> bool:
        """Remove an item from the flat list or a section, renumbering its siblings."""
        kind = ItemKind(kind)
        if kind in self._stores:
            if section_id is None:
                raise ValidationError("section_id is required for sectioned lists", "section_id")
            return self._stores[kind].remove_item(section_id, item_id)

        items = self._flat[kind]
        remaining = [item for item in items if item["id"] != item_id]
        if len(remaining) == len(items):
            return False
        self._flat[kind] = auto_correct_positions(remaining)
        return True

    def apply_drop(
        self,
        kind: ItemKind,
        source_scope_id: str,
        source_index: int,
        dest_scope_id: str | None,
        dest_index: int | None,
    ) -> bool:
        """
        Apply a completed drag-and-drop gesture.

        Args:
            kind: Kind of the dragged item
            source_scope_id: Section ID the item came from, or FLAT_SCOPE_ID
            source_index: Index of the item in its source scope
            dest_scope_id: Section ID it was dropped in, FLAT_SCOPE_ID, or None
                           when dropped outside any target
            dest_index: Drop index in the destination scope

        Returns:
            True if positions changed, False for a no-op drop

        Raises:
            NotFoundError: If a scope ID does not exist in the current mode
            InvalidIndexError: If an index is out of range
        """
        kind = ItemKind(kind)
        if dest_scope_id is None or dest_index is None:
            return False
        if source_scope_id == dest_scope_id and source_index == dest_index:
            return False

        if kind in self._stores:
            for scope_id in (source_scope_id, dest_scope_id):
                if scope_id == FLAT_SCOPE_ID:
                    raise NotFoundError("Scope", scope_id)
            self._stores[kind].move_item(source_scope_id, dest_scope_id, source_index, dest_index)
            return True

        for scope_id in (source_scope_id, dest_scope_id):
            if scope_id != FLAT_SCOPE_ID:
                raise NotFoundError("Scope", scope_id)
        self._flat[kind] = reorder_within_scope(self._flat[kind], source_index, dest_index)
        return True

    def repair_positions(self) -> list[PositionConflictReport]:
        """
        Rewrite every scope's ranks to follow its current list order.

        Returns:
            Conflict reports for the scopes that had duplicated ranks
        """
        reports = []
        for kind in ItemKind:
            if kind in self._stores:
                reports.extend(self._stores[kind].repair_positions())
                continue
            report = detect_position_conflicts(self._flat[kind])
            if report.has_conflicts:
                reports.append(report)
            self._flat[kind] = auto_correct_positions(self._flat[kind])
        return reports

    def to_payload(self) -> dict[str, Any]:
        """
        Build the recipe document for validation and saving.

        The inactive representation of each kind is written as an empty list.
        """
        payload = copy.deepcopy(self._fields)
        for kind in ItemKind:
            layout = self.layout(kind)
            if isinstance(layout, SectionedLayout):
                payload[kind.flat_field] = []
                payload[kind.sections_field] = layout.sections
            else:
                payload[kind.flat_field] = layout.items
                payload[kind.sections_field] = []
        return payload

    def validate(self) -> ValidationResult:
        """Validate the current recipe document."""
        return validate_recipe(self.to_payload())
