"""MCP tool handlers for executing tool operations."""

import json
from typing import Any

from mcp import McpError
from mcp.types import ErrorData, TextContent

from recipe_sections.exceptions import (
    DatabaseError,
    InvalidIndexError,
    NotFoundError,
    RecipeValidationError,
    ValidationError,
)
from recipe_sections.models.layout import ItemKind
from recipe_sections.services.recipe_service import RecipeService
from recipe_sections.services.section.conversion import flat_to_sectioned, sectioned_to_flat
from recipe_sections.services.section.normalization import NormalizationSummary, normalize_imported_recipe
from recipe_sections.services.section.reordering import (
    auto_correct_positions,
    detect_position_conflicts,
    move_between_scopes,
    reorder_within_scope,
)
from recipe_sections.services.section.validation import validate_recipe
from recipe_sections.mcp.serializers import serialize_model, serialize_result


def _text(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


# Position handlers
async def handle_reorder_within_scope(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle reorder_within_scope tool."""
    items = reorder_within_scope(
        arguments["items"],
        arguments["from_index"],
        arguments["to_index"],
        key=arguments.get("key", "position"),
    )
    return _text({"items": items})


async def handle_move_between_scopes(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle move_between_scopes tool."""
    result = move_between_scopes(
        arguments["source_items"],
        arguments["dest_items"],
        arguments["source_index"],
        arguments["dest_index"],
        key=arguments.get("key", "position"),
    )
    return _text(serialize_result(result))


async def handle_detect_position_conflicts(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle detect_position_conflicts tool."""
    report = detect_position_conflicts(arguments["items"], key=arguments.get("key", "position"))
    return _text(serialize_result(report))


async def handle_auto_correct_positions(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle auto_correct_positions tool."""
    items = auto_correct_positions(arguments["items"], key=arguments.get("key", "position"))
    return _text({"items": items})


# Conversion handlers
async def handle_convert_to_sections(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle convert_to_sections tool."""
    sections = flat_to_sectioned(
        arguments["items"],
        ItemKind(arguments["kind"]),
        name=arguments.get("name"),
    )
    return _text({"sections": sections})


async def handle_convert_to_flat(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle convert_to_flat tool."""
    items = sectioned_to_flat(arguments["sections"], ItemKind(arguments["kind"]))
    return _text({"items": items})


# Recipe handlers
async def handle_validate_recipe(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle validate_recipe tool."""
    return _text(serialize_result(validate_recipe(arguments["recipe"])))


async def handle_normalize_recipe(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle normalize_recipe tool."""
    summary = NormalizationSummary()
    recipe = normalize_imported_recipe(arguments["recipe"], summary)
    return _text({"recipe": recipe, "summary": summary.to_dict(), "message": summary.message()})


async def handle_save_recipe(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle save_recipe tool."""
    with db.session() as session:
        recipe_service = RecipeService(session)
        recipe = recipe_service.save_recipe(
            arguments["recipe"],
            recipe_id=arguments.get("recipe_id"),
        )
        return _text(serialize_model(recipe))


async def handle_get_recipe(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle get_recipe tool."""
    with db.session() as session:
        recipe_service = RecipeService(session)
        recipe = recipe_service.get_recipe(arguments["recipe_id"])
        return _text(serialize_model(recipe))


async def handle_delete_recipe(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle delete_recipe tool."""
    with db.session() as session:
        recipe_service = RecipeService(session)
        deleted = recipe_service.delete_recipe(arguments["recipe_id"])
        return _text({"deleted": deleted})


async def handle_list_recipes(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle list_recipes tool."""
    with db.session() as session:
        recipe_service = RecipeService(session)
        recipes = recipe_service.list_recipes(
            title_pattern=arguments.get("title_pattern"),
            limit=arguments.get("limit", 100),
            offset=arguments.get("offset", 0),
        )
        return _text({"recipes": recipes})


# Tool handler registry
TOOL_HANDLERS: dict[str, callable] = {
    "reorder_within_scope": handle_reorder_within_scope,
    "move_between_scopes": handle_move_between_scopes,
    "detect_position_conflicts": handle_detect_position_conflicts,
    "auto_correct_positions": handle_auto_correct_positions,
    "convert_to_sections": handle_convert_to_sections,
    "convert_to_flat": handle_convert_to_flat,
    "validate_recipe": handle_validate_recipe,
    "normalize_recipe": handle_normalize_recipe,
    "save_recipe": handle_save_recipe,
    "get_recipe": handle_get_recipe,
    "delete_recipe": handle_delete_recipe,
    "list_recipes": handle_list_recipes,
}


async def call_tool_handler(tool_name: str, arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """
    Call the appropriate tool handler.

    Args:
        tool_name: Name of the tool to call
        arguments: Tool arguments
        db: Database instance

    Returns:
        List of TextContent with tool execution result

    Raises:
        McpError: If tool name is unknown or handler raises an error
    """
    if tool_name not in TOOL_HANDLERS:
        raise McpError(
            ErrorData(
                code=-32601,  # Method not found
                message=f"Unknown tool: {tool_name}",
            )
        )

    handler = TOOL_HANDLERS[tool_name]

    try:
        return await handler(arguments, db)
    except McpError:
        # Re-raise MCP errors as-is
        raise
    except RecipeValidationError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Validation error: {str(e)}",
                data=[issue.to_dict() for issue in e.issues],
            )
        )
    except (ValidationError, InvalidIndexError, KeyError, ValueError) as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Invalid params: {str(e)}",
            )
        )
    except NotFoundError as e:
        raise McpError(
            ErrorData(
                code=-32001,  # Custom error: not found
                message=str(e),
            )
        )
    except DatabaseError as e:
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Database error: {str(e)}",
            )
        )
    except Exception as e:
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Internal error: {str(e)}",
            )
        )
