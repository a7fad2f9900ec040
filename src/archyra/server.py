"""
MCP server exposing the component registry as tools.

The server advertises four tools (``list_components``, ``get_component``,
``add_component`` and ``get_install_command``) and routes every call through
:func:`archyra.tooling.handlers.dispatch_tool`. Calls are stateless; a failed
call becomes an ``isError`` result and never stops the server.

Usage:
    archyra serve
"""

from __future__ import annotations

import logging
from typing import Any

import anyio
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import __version__
from .tooling.config import ArchyraSettings, load_settings
from .tooling.handlers import dispatch_tool
from .tooling.registry import ComponentRegistry, default_registry
from .tooling.tool_schemas import TOOL_SPECS, input_schema

LOGGER = logging.getLogger(__name__)

__all__ = ["ToolCallError", "build_tools", "create_mcp_server", "run_stdio_server"]


class ToolCallError(RuntimeError):
    """Raised inside the call handler so the SDK reports an error result."""


def build_tools() -> list[Tool]:
    return [
        Tool(name=spec.name, description=spec.description, inputSchema=dict(input_schema(spec.name)))
        for spec in TOOL_SPECS.values()
    ]


def create_mcp_server(
    *,
    registry: ComponentRegistry | None = None,
    settings: ArchyraSettings | None = None,
) -> Server:
    """Create and configure the MCP server with all component tools."""

    resolved_settings = settings or load_settings()
    resolved_registry = registry if registry is not None else default_registry()
    server: Server = Server(resolved_settings.server_name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return build_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        response = dispatch_tool(name, arguments, registry=resolved_registry, settings=resolved_settings)
        if response.is_error:
            raise ToolCallError(response.to_text())
        return [TextContent(type="text", text=response.to_text())]

    return server


async def _serve(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        LOGGER.info("Archyra MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_stdio_server(settings: ArchyraSettings | None = None) -> None:
    """Run the server on stdin/stdout until the client disconnects."""

    server = create_mcp_server(settings=settings)
    anyio.run(_serve, server)
