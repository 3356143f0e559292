"""Position reconciliation for items and sections.

Every function here is pure: inputs are never mutated, and results are new
lists of shallow-copied dicts. The ``key`` argument names the rank field,
``"position"`` for items and ``"order"`` for section lists.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from recipe_sections.exceptions import InvalidIndexError
from recipe_sections.models.layout import POSITION_KEY

logger = logging.getLogger(__name__)


class ScopeMove(NamedTuple):
    """Result of moving one item between two scopes."""

    source_items: list[dict[str, Any]]
    dest_items: list[dict[str, Any]]
    moved_item: dict[str, Any]


@dataclass
class PositionConflict:
    """A rank value claimed by more than one item."""

    position: int
    ids: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"position": self.position, "ids": list(self.ids)}


@dataclass
class PositionConflictReport:
    """Duplicate ranks found in a scope."""

    conflicts: list[PositionConflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_conflicts": self.has_conflicts,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


@dataclass
class PositionAudit:
    """Everything wrong with the stored ranks of a scope."""

    duplicates: list[int] = field(default_factory=list)
    invalid: list[Any] = field(default_factory=list)
    gaps: list[int] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not (self.duplicates or self.invalid or self.gaps)

    @property
    def errors(self) -> list[str]:
        messages = [f"Invalid position: {value!r} (must be non-negative integer)" for value in self.invalid]
        messages.extend(f"Duplicate position: {value}" for value in self.duplicates)
        messages.extend(f"Missing position: {value}" for value in self.gaps)
        return messages


def is_rank(value: Any) -> bool:
    """Check whether a value is a usable position or order: a non-negative integer."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _renumber(items: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    return [{**item, key: index} for index, item in enumerate(items)]


def reorder_within_scope(
    items: list[dict[str, Any]],
    from_index: int,
    to_index: int,
    key: str = POSITION_KEY,
) -> list[dict[str, Any]]:
    """
    Move one item to a new index inside a single scope.

    Args:
        items: Items of the scope, in display order
        from_index: Current index of the item being moved
        to_index: Index the item should end up at
        key: Rank field to renumber

    Returns:
        New list with ranks 0..n-1 matching the new array order

    Raises:
        InvalidIndexError: If either index is outside [0, len(items) - 1]
    """
    if not items:
        return []

    length = len(items)
    for name, index in (("from_index", from_index), ("to_index", to_index)):
        if not 0 <= index < length:
            raise InvalidIndexError(
                f"Invalid {name}: {index} (scope length {length})",
                index=index,
                length=length,
            )

    if from_index == to_index:
        return [dict(item) for item in items]

    result = list(items)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return _renumber(result, key)


def move_between_scopes(
    source_items: list[dict[str, Any]],
    dest_items: list[dict[str, Any]],
    source_index: int,
    dest_index: int,
    key: str = POSITION_KEY,
) -> ScopeMove:
    """
    Move one item out of a source scope and into a destination scope.

    The destination index is clamped to [0, len(dest_items)] since it is an
    insertion point; the source index must name an existing item.

    Args:
        source_items: Items of the scope the item leaves
        dest_items: Items of the scope the item joins
        source_index: Index of the item in the source scope
        dest_index: Insertion index in the destination scope
        key: Rank field to renumber

    Returns:
        ScopeMove with both scopes renumbered independently from 0

    Raises:
        InvalidIndexError: If source_index does not name an item in source_items
    """
    source_items = list(source_items or [])
    dest_items = list(dest_items or [])

    if not 0 <= source_index < len(source_items):
        raise InvalidIndexError(
            f"Invalid source_index: {source_index} (scope length {len(source_items)})",
            index=source_index,
            length=len(source_items),
        )

    dest_index = max(0, min(dest_index, len(dest_items)))

    moved = source_items.pop(source_index)
    dest_items.insert(dest_index, moved)

    new_dest = _renumber(dest_items, key)
    return ScopeMove(
        source_items=_renumber(source_items, key),
        dest_items=new_dest,
        moved_item=new_dest[dest_index],
    )


def detect_position_conflicts(
    items: list[dict[str, Any]], key: str = POSITION_KEY
) -> PositionConflictReport:
    """
    Report every rank held by two or more items.

    Items without a rank are not yet assigned and are not conflicts.

    Args:
        items: Items of one scope
        key: Rank field to inspect

    Returns:
        PositionConflictReport, conflicts sorted by rank
    """
    holders: dict[Any, list[str]] = {}
    for item in items or []:
        value = item.get(key)
        if value is None:
            continue
        holders.setdefault(value, []).append(item.get("id"))

    conflicts = [
        PositionConflict(position=value, ids=ids)
        for value, ids in holders.items()
        if len(ids) > 1
    ]
    conflicts.sort(key=lambda c: c.position)
    return PositionConflictReport(conflicts=conflicts)


def auto_correct_positions(
    items: list[dict[str, Any]], key: str = POSITION_KEY
) -> list[dict[str, Any]]:
    """
    Rewrite ranks to 0..n-1 following the current array order.

    Stored ranks are ignored, so duplicates, negatives, gaps and missing values
    are all repaired without moving any item relative to another. Applying it
    twice gives the same result as applying it once.
    """
    corrected = _renumber(list(items or []), key)
    changed = sum(1 for before, after in zip(items or [], corrected) if before.get(key) != after[key])
    if changed:
        logger.debug("Corrected %d of %d %s values", changed, len(corrected), key)
    return corrected


def reindex_positions(
    items: list[dict[str, Any]], key: str = POSITION_KEY
) -> list[dict[str, Any]]:
    """
    Sort items by their stored rank and renumber them 0..n-1.

    Ties are broken by id; items without a usable rank go last in their
    original order. Use this when stored ranks, not array order, carry the
    intended ordering (for example data loaded from storage).
    """
    indexed = list(enumerate(items or []))

    def sort_key(entry: tuple[int, dict[str, Any]]) -> tuple:
        index, item = entry
        value = item.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (0, value, str(item.get("id", "")), index)
        return (1, 0, "", index)

    indexed.sort(key=sort_key)
    return _renumber([item for _, item in indexed], key)


def sort_by_rank(items: list[dict[str, Any]], key: str = POSITION_KEY) -> list[dict[str, Any]]:
    """
    Order items by stored rank without renumbering them.

    An item whose rank is missing or not a non-negative integer ranks at its
    array index. Ties keep array order. Never raises on bad rank values.
    """
    indexed = list(enumerate(items or []))

    def sort_key(entry: tuple[int, dict[str, Any]]) -> tuple[int, int]:
        index, item = entry
        value = item.get(key) if isinstance(item, dict) else None
        return (value if is_rank(value) else index, index)

    indexed.sort(key=sort_key)
    return [item for _, item in indexed]


def next_position(items: list[dict[str, Any]], key: str = POSITION_KEY) -> int:
    """Rank a new item appended to the scope should take."""
    ranks = [item[key] for item in items or [] if is_rank(item.get(key))]
    if not ranks:
        return 0
    return max(ranks) + 1


def find_position_problems(
    items: list[dict[str, Any]], key: str = POSITION_KEY
) -> PositionAudit:
    """
    Audit the stored ranks of a scope.

    Args:
        items: Items of one scope
        key: Rank field to inspect

    Returns:
        PositionAudit with invalid values, duplicated ranks, and ranks missing
        from the expected 0..n-1 sequence
    """
    audit = PositionAudit()
    seen: dict[int, int] = {}
    for item in items or []:
        value = item.get(key)
        if not is_rank(value):
            audit.invalid.append(value)
            continue
        seen[value] = seen.get(value, 0) + 1

    audit.duplicates = sorted(value for value, count in seen.items() if count > 1)
    audit.gaps = [value for value in range(len(items or [])) if value not in seen]
    return audit
