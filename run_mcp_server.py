"""
Smart Flow MCP Server Entry Point.

Run the MCP server with either stdio or SSE transport.

Usage:
    # stdio mode (desktop clients)
    python run_mcp_server.py --transport stdio

    # SSE mode (Docker/remote)
    python run_mcp_server.py --transport sse --port 8080

    # Use environment variables
    MCP_TRANSPORT=sse MCP_PORT=8080 python run_mcp_server.py
"""

import argparse
import asyncio
import logging
import sys

from smart_flow.config import get_config
from smart_flow.mcp_server import run_mcp_server

logger = logging.getLogger("smart-flow-mcp")


def main():
    """Main entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Smart Flow MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Desktop client (stdio)
  python run_mcp_server.py --transport stdio

  # Docker/Remote (SSE)
  python run_mcp_server.py --transport sse --port 8080

Environment Variables:
  MCP_TRANSPORT              Transport type: stdio or sse (default: stdio)
  MCP_HOST                   Host for SSE transport (default: 0.0.0.0)
  MCP_PORT                   Port for SSE transport (default: 8080)
  OPENAI_API_KEY             OpenAI API key for enrichment
  OPENAI_MODEL               Enrichment model (default: gpt-4.1-mini)
  SMART_FLOW_DEFAULT_LOCALE  Locale for currency defaults (default: en-US)
  SMART_FLOW_LOG_LEVEL       Log level (default: INFO)
        """,
    )

    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=config.mcp_transport,
        help=f"Transport type (default: {config.mcp_transport})",
    )

    parser.add_argument(
        "--host",
        default=config.mcp_host,
        help=f"Host for SSE transport (default: {config.mcp_host})",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=config.mcp_port,
        help=f"Port for SSE transport (default: {config.mcp_port})",
    )

    args = parser.parse_args()

    # stdout belongs to the protocol in stdio mode, so report on the log
    logger.info("Smart Flow MCP Server: transport=%s", args.transport)
    if args.transport == "sse":
        logger.info("Listening on %s:%s", args.host, args.port)
    logger.info("Enrichment model: %s", config.enrichment_model)

    try:
        asyncio.run(
            run_mcp_server(
                transport=args.transport,
                host=args.host,
                port=args.port,
            )
        )
    except KeyboardInterrupt:
        logger.info("Server stopped.")
    except Exception as e:
        logger.error("Error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
