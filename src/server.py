"""MCP (Model Context Protocol) server exposing the company information tools.

Claude Desktop or any other MCP client discovers the tools of the selected
variant and invokes them over stdio.

Run with:
    python -m src.server --variant brightdata
    # or
    company-info-mcp --variant scrapingdog
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolRequest, CallToolResult, ServerResult, Tool

from src.config import Settings
from src.dispatcher import DEFAULT_VARIANT, VARIANTS, ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "company-info-server"


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server whose tools are served by *dispatcher*."""
    app = Server(SERVER_NAME)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        return dispatcher.list_tools()

    # Not @app.call_tool(): McpError has to reach the client as a JSON-RPC
    # error, and the dispatcher is the only argument validator.
    async def call_tool(request: CallToolRequest) -> ServerResult:
        content = await dispatcher.dispatch(request.params.name, request.params.arguments)
        return ServerResult(CallToolResult(content=content, isError=False))

    app.request_handlers[CallToolRequest] = call_tool
    return app


async def _run(app: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """Run the MCP server over stdio."""
    parser = argparse.ArgumentParser(
        prog="company-info-mcp",
        description="Company, job and employee lookup tools over MCP stdio.",
    )
    parser.add_argument(
        "--variant",
        choices=sorted(VARIANTS),
        default=DEFAULT_VARIANT,
        help=f"Which provider tool set to expose (default: {DEFAULT_VARIANT}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose / debug logging.",
    )
    args = parser.parse_args(argv)

    # basicConfig logs to stderr; stdout carries the JSON-RPC stream.
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    settings = Settings.from_env()
    dispatcher = ToolDispatcher.for_variant(args.variant, settings)
    logger.info(
        "Starting company information MCP server (%s variant, %d tools) …",
        args.variant,
        len(dispatcher.tools),
    )
    asyncio.run(_run(create_server(dispatcher)))


if __name__ == "__main__":
    main()
