"""
Building blocks shared by the Archyra MCP server, CLI and agent adapters.

This package exposes the read-only component registry, the tool schemas and
handlers, and the tagged response type that every surface reuses.
"""

from .handlers import dispatch_tool
from .registry import ComponentEntry, ComponentRegistry, default_registry, load_registry
from .responses import ResponsePayload, ToolResponse

__all__ = [
    "ComponentEntry",
    "ComponentRegistry",
    "ResponsePayload",
    "ToolResponse",
    "default_registry",
    "dispatch_tool",
    "load_registry",
]
