"""
LangChain tool definitions that expose the component registry to agents.

The tools share names, argument schemas and handlers with the MCP server, so a
LangChain/LangGraph agent sees exactly the same contracts as an MCP client.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from langchain_core.tools import BaseTool, tool

from ..tooling.config import ArchyraSettings, load_settings
from ..tooling.handlers import dispatch_tool
from ..tooling.registry import ComponentRegistry, default_registry
from ..tooling.responses import ToolResponse
from ..tooling.tool_schemas import (
    AddComponentInput,
    GetComponentInput,
    GetInstallCommandInput,
    ListComponentsInput,
    ToolOutput,
)

__all__ = ["create_component_tools"]


def _to_output(response: ToolResponse) -> Mapping[str, Any]:
    if response.is_error:
        return ToolOutput(status="error", message=response.message).model_dump()
    return ToolOutput(status="success", data=response.payload).model_dump()


def create_component_tools(
    registry: Optional[ComponentRegistry] = None,
    *,
    settings: Optional[ArchyraSettings] = None,
) -> list[BaseTool]:
    catalog = registry if registry is not None else default_registry()
    config = settings or load_settings()

    def _call(tool_name: str, arguments: Mapping[str, Any]) -> Mapping[str, Any]:
        return _to_output(dispatch_tool(tool_name, arguments, registry=catalog, settings=config))

    @tool("list_components", args_schema=ListComponentsInput)
    def list_components(category: str = "all") -> Mapping[str, Any]:
        """List all available AI animation components. Optionally filter by category."""

        return _call("list_components", {"category": category})

    @tool("get_component", args_schema=GetComponentInput)
    def get_component(name: str, format: str = "react") -> Mapping[str, Any]:
        """Get props, usage example and source code for one component (react or vanilla format)."""

        return _call("get_component", {"name": name, "format": format})

    @tool("add_component", args_schema=AddComponentInput)
    def add_component(name: str, directory: str | None = None, format: str = "react") -> Mapping[str, Any]:
        """Return file paths, contents and setup steps for adding a component to a project."""

        return _call("add_component", {"name": name, "directory": directory, "format": format})

    @tool("get_install_command", args_schema=GetInstallCommandInput)
    def get_install_command(name: str) -> Mapping[str, Any]:
        """Get the npm install command for required dependencies of a component."""

        return _call("get_install_command", {"name": name})

    return [list_components, get_component, add_component, get_install_command]
