"""MCP module with tool schemas, handlers, and serializers."""

from recipe_sections.mcp.tool_handlers import call_tool_handler, TOOL_HANDLERS
from recipe_sections.mcp.tool_schemas import get_tool_schemas
from recipe_sections.mcp.serializers import serialize_model, serialize_result

__all__ = [
    "call_tool_handler",
    "TOOL_HANDLERS",
    "get_tool_schemas",
    "serialize_model",
    "serialize_result",
]
