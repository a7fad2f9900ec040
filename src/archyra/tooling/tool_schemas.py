"""
Pydantic schemas that describe the component tools.

The input models validate loosely typed tool arguments at the dispatch
boundary and double as the JSON schemas advertised by the MCP server and the
LangChain adapters, so every surface exposes identical contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, MutableMapping

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "AddComponentInput",
    "ComponentFormat",
    "GetComponentInput",
    "GetInstallCommandInput",
    "ListComponentsInput",
    "TOOL_SPECS",
    "ToolOutput",
    "ToolSpec",
    "input_schema",
]

CategoryFilter = Literal["all", "loading", "processing", "creative", "auth", "chat", "ecommerce"]
ComponentFormat = Literal["react", "vanilla"]


class _ToolInput(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ListComponentsInput(_ToolInput):
    category: CategoryFilter = Field(
        "all",
        description="Filter by category: loading, processing, creative, auth, chat, ecommerce, or all",
    )


class GetComponentInput(_ToolInput):
    name: str = Field(
        ...,
        min_length=1,
        description='Component name or ID (e.g., "LoadingDots", "loading-dots", "PulseCircle")',
    )
    format: ComponentFormat = Field(
        "react",
        description='Output format: "react" for React/Framer Motion, "vanilla" for plain HTML/CSS/JS',
    )


class AddComponentInput(_ToolInput):
    name: str = Field(..., min_length=1, description="Component name or ID to add")
    directory: str | None = Field(
        default=None,
        description="Directory path where to create the component (default: ./components)",
    )
    format: ComponentFormat = Field(
        "react",
        description='Output format: "react" (default) or "vanilla" for plain HTML/CSS/JS',
    )


class GetInstallCommandInput(_ToolInput):
    name: str = Field(..., min_length=1, description="Component name or ID")


class ToolOutput(BaseModel):
    """Envelope returned by the LangChain adapters."""

    status: Literal["success", "error"]
    data: Any = None
    message: str | None = None


@dataclass(slots=True, frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[_ToolInput]


TOOL_SPECS: Mapping[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            "list_components",
            "List all available AI animation components. Optionally filter by category.",
            ListComponentsInput,
        ),
        ToolSpec(
            "get_component",
            "Get detailed information about a specific component including props, usage example, and source code. "
            "Supports React and vanilla HTML/CSS formats.",
            GetComponentInput,
        ),
        ToolSpec(
            "add_component",
            "Add an animation component to the user's project. Supports React (.tsx) and vanilla HTML/CSS/JS formats.",
            AddComponentInput,
        ),
        ToolSpec(
            "get_install_command",
            "Get the npm install command for required dependencies of a component.",
            GetInstallCommandInput,
        ),
    )
}


def input_schema(tool_name: str) -> Mapping[str, Any]:
    """JSON schema for a tool's arguments, as advertised to clients."""

    spec = TOOL_SPECS[tool_name]
    schema: MutableMapping[str, Any] = dict(spec.input_model.model_json_schema())
    schema.pop("title", None)
    schema.setdefault("properties", {})
    return schema
