"""Recipe, section, and item validation logic.

Validation never mutates its input and never raises for bad data. Every
rule runs, and each failure is reported as a ``ValidationIssue`` with a
dotted field path.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any

from recipe_sections.exceptions import RecipeValidationError
from recipe_sections.models.layout import ItemKind

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass(frozen=True)
class ValidationIssue:
    """One failed rule."""

    path: str
    message: str
    code: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message, "code": self.code}


@dataclass
class ValidationResult:
    """All failures found in one validation pass."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def errors_for(self, path: str) -> list[ValidationIssue]:
        """Issues reported at exactly this path."""
        return [issue for issue in self.issues if issue.path == path]

    def codes(self) -> set[str]:
        return {issue.code for issue in self.issues}

    def raise_for_errors(self) -> None:
        """Raise RecipeValidationError carrying every issue, if there are any."""
        if self.issues:
            raise RecipeValidationError(self.issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.issues],
        }


def _join(prefix: str, name: str | int) -> str:
    return f"{prefix}.{name}" if prefix else str(name)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


class RecipeValidator:
    """Validates recipe documents, sections, and items according to business rules."""

    TITLE_MAX_LENGTH = 500

    # Labels used in messages, per item kind
    ITEM_LABELS = {ItemKind.INGREDIENT: "ingredient", ItemKind.INSTRUCTION: "instruction"}
    SECTION_MINIMUM_MESSAGES = {
        ItemKind.INGREDIENT: "This section must contain at least one ingredient",
        ItemKind.INSTRUCTION: "This section must contain at least one step",
    }

    def __init__(self) -> None:
        self._issues: list[ValidationIssue] = []

    def _add(self, path: str, message: str, code: str) -> None:
        self._issues.append(ValidationIssue(path=path, message=message, code=code))

    def _collect(self) -> ValidationResult:
        result = ValidationResult(issues=self._issues)
        self._issues = []
        return result

    # Field rules

    def _check_id(self, value: Any, path: str, label: str) -> None:
        if value is None or value == "":
            self._add(path, f"{label.capitalize()} ID is required", "required")
        elif not isinstance(value, str) or not UUID_PATTERN.match(value):
            self._add(path, f"Invalid {label} ID format. Must be a valid UUID.", "invalid_id")

    def _check_text(self, value: Any, path: str, label: str) -> None:
        if value is None or value == "":
            self._add(path, f"{label} cannot be empty", "required")
        elif not isinstance(value, str):
            self._add(path, f"{label} must be a string", "invalid_type")
        elif not value.strip():
            self._add(path, f"{label} cannot be only whitespace", "whitespace")

    def _check_non_negative(self, value: Any, path: str, label: str, integer: bool) -> None:
        if not _is_finite(value):
            self._add(path, f"{label} must be a finite number", "invalid_type")
            return
        if integer and not _is_integer(value):
            self._add(path, f"{label} must be an integer", "not_integer")
        if value < 0:
            self._add(path, f"{label} must be non-negative", "negative")

    def _check_positive_integer(self, value: Any, path: str, label: str) -> None:
        if not _is_finite(value):
            self._add(path, f"{label} must be a finite number", "invalid_type")
            return
        if not _is_integer(value):
            self._add(path, f"{label} must be an integer", "not_integer")
        if value <= 0:
            self._add(path, f"{label} must be positive", "not_positive")

    # Item rules

    def _check_ingredient(self, item: Any, path: str) -> None:
        if not isinstance(item, dict):
            self._add(path, "Ingredient must be an object", "invalid_type")
            return
        self._check_id(item.get("id"), _join(path, "id"), "ingredient")
        self._check_text(item.get("name"), _join(path, "name"), "Ingredient name")
        if "amount" not in item or item["amount"] is None:
            self._add(_join(path, "amount"), "Amount is required", "required")
        else:
            self._check_non_negative(item["amount"], _join(path, "amount"), "Amount", integer=False)
        if item.get("unit") is None:
            self._add(_join(path, "unit"), "Unit is required", "required")
        elif not isinstance(item["unit"], str):
            self._add(_join(path, "unit"), "Unit must be a string", "invalid_type")
        if item.get("position") is not None:
            self._check_non_negative(item["position"], _join(path, "position"), "Position", integer=True)

    def _check_instruction(self, item: Any, path: str) -> None:
        if not isinstance(item, dict):
            self._add(path, "Instruction must be an object", "invalid_type")
            return
        self._check_id(item.get("id"), _join(path, "id"), "instruction")
        if item.get("step") is None:
            self._add(_join(path, "step"), "Step number is required", "required")
        else:
            self._check_positive_integer(item["step"], _join(path, "step"), "Step number")
        self._check_text(item.get("content"), _join(path, "content"), "Instruction content")
        if item.get("duration") is not None:
            self._check_positive_integer(item["duration"], _join(path, "duration"), "Duration")
        if item.get("position") is not None:
            self._check_non_negative(item["position"], _join(path, "position"), "Position", integer=True)

    def _check_item(self, item: Any, kind: ItemKind, path: str) -> None:
        if kind is ItemKind.INGREDIENT:
            self._check_ingredient(item, path)
        else:
            self._check_instruction(item, path)

    def _check_section(self, section: Any, kind: ItemKind, path: str) -> None:
        if not isinstance(section, dict):
            self._add(path, "Section must be an object", "invalid_type")
            return
        self._check_id(section.get("id"), _join(path, "id"), "section")
        name = section.get("name")
        if name is None or name == "":
            self._add(_join(path, "name"), "Section name is required", "required")
        elif not isinstance(name, str):
            self._add(_join(path, "name"), "Section name must be a string", "invalid_type")
        elif not name.strip():
            self._add(_join(path, "name"), "Section name cannot be only whitespace", "whitespace")
        if section.get("order") is None:
            self._add(_join(path, "order"), "Order is required", "required")
        else:
            self._check_non_negative(section["order"], _join(path, "order"), "Order", integer=True)

        items = section.get("items")
        if not isinstance(items, list):
            self._add(_join(path, "items"), "Section items must be a list", "invalid_type")
            return
        if not items:
            self._add(_join(path, "items"), self.SECTION_MINIMUM_MESSAGES[kind], "empty_section")
        for index, item in enumerate(items):
            self._check_item(item, kind, _join(_join(path, "items"), index))

    # Public entry points

    def validate_ingredient(self, item: Any, path: str = "") -> ValidationResult:
        """Validate a single ingredient item."""
        self._check_ingredient(item, path)
        return self._collect()

    def validate_instruction(self, item: Any, path: str = "") -> ValidationResult:
        """Validate a single instruction item."""
        self._check_instruction(item, path)
        return self._collect()

    def validate_section(self, section: Any, kind: ItemKind, path: str = "") -> ValidationResult:
        """
        Validate one section and its items.

        Args:
            section: Section dict
            kind: Kind of the items the section holds
            path: Path prefix for reported issues

        Returns:
            ValidationResult; an empty section is always an issue here
        """
        self._check_section(section, ItemKind(kind), path)
        return self._collect()

    def validate_recipe(self, payload: Any) -> ValidationResult:
        """
        Validate a whole recipe document.

        Checks the title, every flat item and section of both kinds, that at
        least one ingredient and one instruction exist across the flat list
        and all sections, and that section and item IDs are unique across
        every scope of both kinds.

        Args:
            payload: Recipe document dict

        Returns:
            ValidationResult with every issue found
        """
        if not isinstance(payload, dict):
            self._add("", "Recipe must be an object", "invalid_type")
            return self._collect()

        title = payload.get("title")
        self._check_text(title, "title", "Title")
        if isinstance(title, str) and len(title) > self.TITLE_MAX_LENGTH:
            self._add("title", f"Title must be at most {self.TITLE_MAX_LENGTH} characters", "too_long")

        section_ids: dict[str, str] = {}
        item_ids: dict[str, str] = {}

        for kind in ItemKind:
            label = self.ITEM_LABELS[kind]
            flat = payload.get(kind.flat_field)
            sections = payload.get(kind.sections_field)
            count = 0

            if flat is None:
                flat = []
            if not isinstance(flat, list):
                self._add(kind.flat_field, f"{kind.flat_field} must be a list", "invalid_type")
                flat = []
            for index, item in enumerate(flat):
                path = _join(kind.flat_field, index)
                self._check_item(item, kind, path)
                self._track_id(item, item_ids, path, "item")
            count += len(flat)

            if sections is None:
                sections = []
            if not isinstance(sections, list):
                self._add(kind.sections_field, f"{kind.sections_field} must be a list", "invalid_type")
                sections = []
            for index, section in enumerate(sections):
                path = _join(kind.sections_field, index)
                self._check_section(section, kind, path)
                self._track_id(section, section_ids, path, "section")
                items = section.get("items") if isinstance(section, dict) else None
                if isinstance(items, list):
                    for item_index, item in enumerate(items):
                        self._track_id(item, item_ids, _join(_join(path, "items"), item_index), "item")
                    count += len(items)

            if count == 0:
                self._add(
                    kind.flat_field,
                    f"At least one {label} is required for a recipe",
                    f"missing_{kind.flat_field}",
                )

        return self._collect()

    def _track_id(self, record: Any, seen: dict[str, str], path: str, label: str) -> None:
        if not isinstance(record, dict):
            return
        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id:
            return
        if record_id in seen:
            self._add(
                _join(path, "id"),
                f"Duplicate {label} ID {record_id} (also used at {seen[record_id]})",
                f"duplicate_{label}_id",
            )
        else:
            seen[record_id] = path


def validate_recipe(payload: Any) -> ValidationResult:
    """Validate a whole recipe document."""
    return RecipeValidator().validate_recipe(payload)


def validate_section(section: Any, kind: ItemKind, path: str = "") -> ValidationResult:
    """Validate one section of the given kind."""
    return RecipeValidator().validate_section(section, kind, path)
