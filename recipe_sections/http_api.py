"""HTTP API for the Recipe-Sections MCP service using Server-Sent Events (SSE)."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from fastapi import Body, FastAPI
from fastapi.responses import StreamingResponse
from mcp import McpError

from recipe_sections.config import get_settings
from recipe_sections.mcp.tool_handlers import call_tool_handler
from recipe_sections.mcp.tool_schemas import get_tool_schemas
from recipe_sections.storage.database import get_db

logger = logging.getLogger(__name__)

SERVICE_NAME = "recipe-sections"
SERVICE_VERSION = "0.1.0"
PROTOCOL_VERSION = "2024-11-05"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Make sure the recipes table exists before serving requests."""
    get_db().create_tables()
    yield


# Create FastAPI app
app = FastAPI(
    title="Recipe-Sections MCP Service",
    description="Position management and validation for sectioned recipe lists",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


def _tool_list() -> list[dict[str, Any]]:
    return [
        {
            "name": tool_def["name"],
            "description": tool_def["description"],
            "inputSchema": tool_def["inputSchema"],
        }
        for tool_def in get_tool_schemas().values()
    ]


async def handle_jsonrpc_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Handle JSON-RPC 2.0 request."""
    jsonrpc = request.get("jsonrpc", "2.0")
    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if method == "initialize":
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "result": {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {},
                "serverInfo": {"name": SERVICE_NAME, "version": SERVICE_VERSION},
            },
        }
    elif method == "tools/list":
        return {"jsonrpc": jsonrpc, "id": request_id, "result": {"tools": _tool_list()}}
    elif method == "tools/call":
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        try:
            result = await call_tool_handler(tool_name, arguments, get_db())
        except McpError as e:
            error = {"code": e.error.code, "message": e.error.message}
            if e.error.data is not None:
                error["data"] = e.error.data
            return {"jsonrpc": jsonrpc, "id": request_id, "error": error}
        except Exception as e:
            logger.exception(f"Error handling tool {tool_name}")
            return {
                "jsonrpc": jsonrpc,
                "id": request_id,
                "error": {"code": -32603, "message": f"Internal error: {str(e)}"},
            }

        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "result": {"content": [{"type": "text", "text": result[0].text}]},
        }
    elif method == "prompts/list":
        # No prompts are exposed
        return {"jsonrpc": jsonrpc, "id": request_id, "result": {"prompts": []}}
    elif method == "resources/list":
        # No resources are exposed
        return {"jsonrpc": jsonrpc, "id": request_id, "result": {"resources": []}}
    else:
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "error": {"code": -32601, "message": f"Method not found: {method}"},
        }


@app.post("/mcp/sse")
async def mcp_sse_post(request: dict = Body(...)):
    """Server-Sent Events endpoint for MCP (POST)."""
    result = await handle_jsonrpc_request(request)
    return StreamingResponse(
        content=iter([f"data: {json.dumps(result)}\n\n"]),
        media_type="text/event-stream",
    )


@app.get("/mcp/sse")
async def mcp_sse_get():
    """Server-Sent Events endpoint for MCP (GET).

    Sends the discovery events (initialize, tools/list, prompts/list,
    resources/list) and then keeps the connection open.
    """

    async def generate_sse_stream():
        discovery = ["initialize", "tools/list", "prompts/list", "resources/list"]
        for request_id, method in enumerate(discovery, start=1):
            response = await handle_jsonrpc_request(
                {"jsonrpc": "2.0", "id": request_id, "method": method, "params": {}}
            )
            if method == "tools/list":
                logger.info(f"MCP SSE GET: Sending {len(response['result']['tools'])} tools")
            yield f"data: {json.dumps(response)}\n\n"
            await asyncio.sleep(0.1)

        try:
            while True:
                await asyncio.sleep(30)  # keepalive
                yield ": keepalive\n\n"
        except asyncio.CancelledError:
            logger.info("MCP SSE GET: Connection closed by client")
            raise

    return StreamingResponse(
        generate_sse_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    database_ok = get_db().ping()
    return {
        "status": "healthy" if database_ok else "degraded",
        "service": SERVICE_NAME,
        "database": database_ok,
    }


def run() -> None:
    """Console script entry point."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)
    uvicorn.run(app, host="0.0.0.0", port=8005)


if __name__ == "__main__":
    run()
