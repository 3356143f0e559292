"""MCP tool schema definitions."""

from typing import Any

_ITEM_LIST = {
    "type": "array",
    "description": "Items of one scope, in display order",
    "items": {"type": "object"},
}

_SECTION_LIST = {
    "type": "array",
    "description": "Sections, each with id, name, order, and items",
    "items": {"type": "object"},
}

_RANK_KEY = {
    "type": "string",
    "enum": ["position", "order"],
    "description": "Rank field to renumber: 'position' for items, 'order' for sections (default: position)",
}

_KIND = {
    "type": "string",
    "enum": ["ingredient", "instruction"],
    "description": "Item kind",
}


def get_tool_schemas() -> dict[str, dict[str, Any]]:
    """Get all MCP tool schemas."""
    return {
        "reorder_within_scope": {
            "name": "reorder_within_scope",
            "description": "Move an item to a new index within one scope and renumber positions",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "items": _ITEM_LIST,
                    "from_index": {"type": "integer", "description": "Current index of the item"},
                    "to_index": {"type": "integer", "description": "Target index of the item"},
                    "key": _RANK_KEY,
                },
                "required": ["items", "from_index", "to_index"],
            },
        },
        "move_between_scopes": {
            "name": "move_between_scopes",
            "description": "Move an item from one scope to another; both scopes are renumbered from 0",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "source_items": _ITEM_LIST,
                    "dest_items": _ITEM_LIST,
                    "source_index": {
                        "type": "integer",
                        "description": "Index of the item in the source scope",
                    },
                    "dest_index": {
                        "type": "integer",
                        "description": "Insertion index in the destination scope (clamped)",
                    },
                    "key": _RANK_KEY,
                },
                "required": ["source_items", "dest_items", "source_index", "dest_index"],
            },
        },
        "detect_position_conflicts": {
            "name": "detect_position_conflicts",
            "description": "Report positions held by more than one item",
            "inputSchema": {
                "type": "object",
                "properties": {"items": _ITEM_LIST, "key": _RANK_KEY},
                "required": ["items"],
            },
        },
        "auto_correct_positions": {
            "name": "auto_correct_positions",
            "description": "Renumber positions 0..n-1 following the current array order",
            "inputSchema": {
                "type": "object",
                "properties": {"items": _ITEM_LIST, "key": _RANK_KEY},
                "required": ["items"],
            },
        },
        "convert_to_sections": {
            "name": "convert_to_sections",
            "description": "Wrap a flat item list into a single default section",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "items": _ITEM_LIST,
                    "kind": _KIND,
                    "name": {
                        "type": "string",
                        "description": "Optional section name (defaults per kind)",
                    },
                },
                "required": ["items", "kind"],
            },
        },
        "convert_to_flat": {
            "name": "convert_to_flat",
            "description": "Flatten sections into one list in section order, then item position",
            "inputSchema": {
                "type": "object",
                "properties": {"sections": _SECTION_LIST, "kind": _KIND},
                "required": ["sections", "kind"],
            },
        },
        "validate_recipe": {
            "name": "validate_recipe",
            "description": "Validate a recipe document and return every failure with its field path",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "recipe": {"type": "object", "description": "Recipe document"},
                },
                "required": ["recipe"],
            },
        },
        "normalize_recipe": {
            "name": "normalize_recipe",
            "description": (
                "Repair an imported recipe document: drop empty items and sections, "
                "name unnamed sections, fill in missing IDs and positions"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "recipe": {"type": "object", "description": "Recipe document"},
                },
                "required": ["recipe"],
            },
        },
        "save_recipe": {
            "name": "save_recipe",
            "description": "Validate, normalize positions, and store a recipe document",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "recipe": {"type": "object", "description": "Recipe document"},
                    "recipe_id": {
                        "type": "string",
                        "description": "Optional recipe ID to overwrite (generates UUID if not provided)",
                    },
                },
                "required": ["recipe"],
            },
        },
        "get_recipe": {
            "name": "get_recipe",
            "description": "Retrieve a stored recipe by ID",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "recipe_id": {"type": "string", "description": "Recipe ID"},
                },
                "required": ["recipe_id"],
            },
        },
        "delete_recipe": {
            "name": "delete_recipe",
            "description": "Delete a stored recipe",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "recipe_id": {"type": "string", "description": "Recipe ID"},
                },
                "required": ["recipe_id"],
            },
        },
        "list_recipes": {
            "name": "list_recipes",
            "description": "List stored recipes with optional title filtering",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "title_pattern": {
                        "type": "string",
                        "description": "Optional title pattern to filter by",
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of recipes (default: 100)",
                    },
                    "offset": {
                        "type": "integer",
                        "description": "Number of recipes to skip (default: 0)",
                    },
                },
            },
        },
    }
