"""
MCP Server implementation for Smart Flow.

Provides both stdio and SSE transport support for the Model Context Protocol.
"""

import json
import logging
from typing import Any, Literal
from urllib.parse import parse_qs

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from smart_flow.config import get_config
from smart_flow.mcp_server.session_store import set_session_api_key
from smart_flow.mcp_server.tools import (
    SYNC_TOOL_HANDLERS,
    get_mcp_tools,
    mcp_enrich_context,
)

SERVICE_NAME = "smart-flow-mcp"

logging.basicConfig(level=get_config().log_level)
logger = logging.getLogger(SERVICE_NAME)


async def dispatch_tool_call(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Run one tool call.

    Failures are reported in the payload as ``{"error": ...}`` so a bad call
    never takes the session down.
    """
    try:
        if name == "enrich_context":
            return await mcp_enrich_context(arguments)
        handler = SYNC_TOOL_HANDLERS.get(name)
        if handler is None:
            return {"error": f"Unknown tool: {name}"}
        return handler(arguments)
    except Exception as e:
        logger.error("Error in %s: %s", name, e)
        return {"error": str(e)}


def create_mcp_server() -> Server:
    """
    Create and configure the MCP server instance.

    Returns:
        Configured MCP Server with smart-flow tools registered.
    """
    server = Server(SERVICE_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name=t["name"],
                description=t["description"],
                inputSchema=t["inputSchema"],
            )
            for t in get_mcp_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        logger.info("Tool call: %s", name)
        result = await dispatch_tool_call(name, arguments or {})
        return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False, default=str))]

    return server


async def run_stdio_server(server: Server) -> None:
    """
    Run MCP server with stdio transport.

    Used for desktop clients and local subprocess communication.
    """
    logger.info("Starting MCP server with stdio transport...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def _session_id_from_scope(scope) -> str | None:
    query = parse_qs(scope.get("query_string", b"").decode("utf-8"))
    values = query.get("session_id")
    return values[0] if values else None


def create_sse_app(server: Server) -> Starlette:
    """
    Create Starlette app for SSE transport.

    Used for remote/Docker deployment.
    """
    # Messages endpoint is relative to the SSE mount point
    sse_transport = SseServerTransport("/messages/")

    async def handle_sse(scope, receive, send):
        """Handle SSE connections - raw ASGI handler."""
        headers = dict(scope.get("headers", []))
        api_key = headers.get(b"x-openai-api-key", b"").decode("utf-8")

        if api_key:
            session_id = _session_id_from_scope(scope)
            logger.info("Received API key from client (session: %s)", session_id)
            set_session_api_key(session_id, api_key)

        async with sse_transport.connect_sse(scope, receive, send) as streams:
            await server.run(
                streams[0],
                streams[1],
                server.create_initialization_options(),
            )

    async def handle_messages(scope, receive, send):
        """Handle message POST requests - raw ASGI handler."""
        await sse_transport.handle_post_message(scope, receive, send)

    async def health_check(request):
        """Health check endpoint."""
        config = get_config()
        return JSONResponse({
            "status": "healthy",
            "service": SERVICE_NAME,
            "transport": "sse",
            "enrichment_model": config.enrichment_model,
        })

    return Starlette(
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Mount("/sse/messages", app=handle_messages),
            Mount("/sse", app=handle_sse),
        ],
    )


async def run_sse_server(server: Server, host: str = "0.0.0.0", port: int = 8080) -> None:
    """
    Run MCP server with SSE transport.

    Args:
        server: MCP Server instance
        host: Host to bind to
        port: Port to listen on
    """
    import uvicorn

    logger.info("Starting MCP server with SSE transport on %s:%s...", host, port)

    app = create_sse_app(server)
    config = uvicorn.Config(app, host=host, port=port, log_level=get_config().log_level.lower())
    server_instance = uvicorn.Server(config)
    await server_instance.serve()


async def run_mcp_server(
    transport: Literal["stdio", "sse"] = "stdio",
    host: str = "0.0.0.0",
    port: int = 8080,
) -> None:
    """
    Run MCP server with specified transport.

    Args:
        transport: Transport type - "stdio" or "sse"
        host: Host for SSE transport (default: 0.0.0.0)
        port: Port for SSE transport (default: 8080)
    """
    server = create_mcp_server()

    if transport == "stdio":
        await run_stdio_server(server)
    elif transport == "sse":
        await run_sse_server(server, host, port)
    else:
        raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'sse'.")
