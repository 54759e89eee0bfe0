"""
MCP Server module for Smart Flow.

Provides Model Context Protocol server implementation
with stdio and SSE transport support.
"""

from smart_flow.mcp_server.server import create_mcp_server, run_mcp_server
from smart_flow.mcp_server.tools import get_mcp_tools

__all__ = [
    "create_mcp_server",
    "run_mcp_server",
    "get_mcp_tools",
]
